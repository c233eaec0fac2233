from __future__ import annotations

import re

# Pronunciation variations common among Kinyarwanda-English speakers.
# Consonant classes go first: the vowel rules would otherwise split them.
# Word boundaries are ASCII-only, so accented letters count as separators.
_REPLACEMENTS: tuple[tuple[re.Pattern[str], str], ...] = (
    # r/l confusion
    (re.compile(r"\br", re.ASCII), "[rl]"),
    (re.compile(r"\bl", re.ASCII), "[rl]"),
    # th spoken as t or d
    (re.compile(r"th", re.ASCII), "[thd]"),
    # v/b confusion
    (re.compile(r"\bv", re.ASCII), "[vb]"),
    (re.compile(r"\bb", re.ASCII), "[vb]"),
    # vowel length
    (re.compile(r"a+", re.ASCII), "a+"),
    (re.compile(r"e+", re.ASCII), "e+"),
    (re.compile(r"i+", re.ASCII), "i+"),
    (re.compile(r"o+", re.ASCII), "o+"),
    (re.compile(r"u+", re.ASCII), "u+"),
)


def normalize_phonetic(text: str) -> str:
    """Rewrite ``text`` so commonly confused sounds compare as equal.

    Plain textual rewrites, not phoneme lookups. The placeholders themselves
    contain letters the rules act on, so a second pass changes the result again.
    """
    normalized = (text or "").lower()
    for pattern, replacement in _REPLACEMENTS:
        normalized = pattern.sub(replacement, normalized)
    return normalized
