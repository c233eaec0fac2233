from __future__ import annotations

from dataclasses import dataclass, field

from rapidfuzz.distance import Levenshtein

from .phonetic import normalize_phonetic


@dataclass(frozen=True)
class ScoredOption:
    option: str
    score: float


@dataclass(frozen=True)
class BestMatch:
    match: str | None
    score: float
    all_matches: list[ScoredOption] = field(default_factory=list)


@dataclass(frozen=True)
class WordMatch:
    found: bool
    matched_word: str | None
    score: float


@dataclass(frozen=True)
class PhoneticMatch:
    match: bool
    score: float


def distance(a: str, b: str) -> int:
    """Single-character edit distance (insert, delete, substitute all cost 1)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Normalized similarity in [0, 1], case-insensitive.

    1.0 means identical. Two empty strings are identical by definition.
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1 - distance(a.lower(), b.lower()) / longest


def find_best_match(input: str, options: list[str], threshold: float = 0.6) -> BestMatch:
    """
    Pick the option most similar to ``input``.

    Args:
        input: Text to look up (lower-cased and trimmed before scoring).
        options: Candidate strings, scanned in order.
        threshold: Minimum similarity the best candidate must reach.

    Returns:
        BestMatch: ``match`` is the top option, or None with ``score`` 0 when the
        top option is below ``threshold``. ``all_matches`` always lists every
        option at or above ``threshold``, best first. Equal scores keep the
        order of ``options`` so the earlier option wins a tie.
    """
    normalized = (input or "").lower().strip()
    scored = [ScoredOption(option, similarity(normalized, option.lower())) for option in options]
    scored.sort(key=lambda s: -s.score)

    passing = [s for s in scored if s.score >= threshold]
    if scored and scored[0].score >= threshold:
        return BestMatch(match=scored[0].option, score=scored[0].score, all_matches=passing)
    return BestMatch(match=None, score=0.0, all_matches=passing)


def contains_fuzzy(input: str, targets: list[str], threshold: float = 0.7) -> WordMatch:
    """Return the first (word, target) pair scoring >= threshold.

    Words of ``input`` form the outer loop and ``targets`` the inner one. The
    scan stops at the first hit rather than looking for the best score, so
    earlier words in an utterance take precedence.
    """
    for word in (input or "").lower().split():
        for target in targets:
            score = similarity(word, target.lower())
            if score >= threshold:
                return WordMatch(found=True, matched_word=target, score=score)
    return WordMatch(found=False, matched_word=None, score=0.0)


def fuzzy_match_phonetic(input: str, target: str, threshold: float = 0.65) -> PhoneticMatch:
    """Plain similarity, falling back to phonetically normalized similarity."""
    plain = similarity(input, target)
    if plain >= threshold:
        return PhoneticMatch(match=True, score=plain)

    phonetic = similarity(normalize_phonetic(input), normalize_phonetic(target))
    return PhoneticMatch(match=phonetic >= threshold, score=max(plain, phonetic))
