from __future__ import annotations

from typing import Iterable, Sequence, Union

from .config import settings
from .fuzzy import contains_fuzzy, fuzzy_match_phonetic
from .logging_utils import setup_logger
from .models import CommandCatalog, CommandDefinition, MatchResult

logger = setup_logger("voicecmd.resolver", settings.log_level)

CatalogLike = Union[CommandCatalog, Sequence[CommandDefinition]]

# Fixed confidence for a substring hit; only an exact hit reports 1.0.
OVERLAP_CONFIDENCE = 0.9
# Fraction of shared words a substring hit needs to count.
MIN_WORD_OVERLAP = 0.5
SUGGESTION_THRESHOLD = 0.3
# Fuzzy stages can score a perfect single-word hit or a phonetic collision,
# but 1.0 is reserved for exact matches.
MAX_FUZZY_CONFIDENCE = 0.99


def _definitions(catalog: CatalogLike) -> Iterable[CommandDefinition]:
    if isinstance(catalog, CommandCatalog):
        return catalog.commands
    return catalog or ()


def _pairs(catalog: CatalogLike):
    """(command, alias) in catalog order, then alias order."""
    for cmd in _definitions(catalog):
        for alias in cmd.aliases:
            yield cmd, alias


def _word_overlap(words: list[str], alias_words: list[str]) -> float:
    longest = max(len(words), len(alias_words))
    if longest == 0:
        return 0.0
    shared = sum(1 for w in words if w in alias_words)
    return shared / longest


def match_command(input: str, catalog: CatalogLike, threshold: float = 0.65) -> MatchResult | None:
    """
    Resolve a transcript to a command of ``catalog``.

    Resolution strategy, first success wins:
    1. Exact alias match (confidence 1.0, first hit in scan order)
    2. Substring either way with more than half the words shared
       (confidence 0.9, first hit in scan order)
    3. Phonetic-aware fuzzy match, best score over every alias
    4. Per-word fuzzy match, replacing stage 3 only with a strictly higher score

    Stages 1-2 take the first hit, 3-4 the best one. Earlier declared commands
    therefore win ties on substring aliases.

    Returns None when nothing reaches ``threshold``.
    """
    normalized = (input or "").lower().strip()

    # Step 1: exact
    for cmd, alias in _pairs(catalog):
        if normalized == alias.lower():
            logger.debug(f"Exact match '{normalized}' -> {cmd.command}")
            return MatchResult(command=cmd.command, confidence=1.0, matched_phrase=alias, stage="exact")

    # Step 2: containment with word overlap
    words = normalized.split()
    for cmd, alias in _pairs(catalog):
        lowered = alias.lower()
        if lowered in normalized or normalized in lowered:
            if _word_overlap(words, lowered.split()) > MIN_WORD_OVERLAP:
                logger.debug(f"Overlap match '{normalized}' ~ '{alias}' -> {cmd.command}")
                return MatchResult(
                    command=cmd.command,
                    confidence=OVERLAP_CONFIDENCE,
                    matched_phrase=alias,
                    stage="overlap",
                )

    # Step 3: phonetic fuzzy, best of all
    best: MatchResult | None = None
    best_score = 0.0
    for cmd, alias in _pairs(catalog):
        result = fuzzy_match_phonetic(normalized, alias, threshold)
        if result.match and result.score > best_score:
            best_score = result.score
            best = MatchResult(
                command=cmd.command,
                confidence=min(result.score, MAX_FUZZY_CONFIDENCE),
                matched_phrase=alias,
                stage="phonetic",
            )

    if best:
        logger.debug(f"Phonetic match '{normalized}' ~ '{best.matched_phrase}' ({best_score:.2f})")
        return best

    # Step 4: word by word
    for cmd, alias in _pairs(catalog):
        alias_words = alias.lower().split()
        for word in words:
            hit = contains_fuzzy(word, alias_words, threshold)
            if hit.found and hit.score > best_score:
                best_score = hit.score
                best = MatchResult(
                    command=cmd.command,
                    confidence=min(hit.score, MAX_FUZZY_CONFIDENCE),
                    matched_phrase=alias,
                    stage="word",
                )

    if best:
        logger.debug(f"Word match '{normalized}' ~ '{best.matched_phrase}' ({best_score:.2f})")
    else:
        logger.debug(f"No match for '{normalized}'")
    return best


def get_suggestions(input: str, catalog: CatalogLike, max_suggestions: int = 3) -> list[str]:
    """Aliases closest to ``input``, best first, for "did you mean" prompts."""
    normalized = (input or "").lower().strip()
    scored = [
        (alias, fuzzy_match_phonetic(normalized, alias, SUGGESTION_THRESHOLD).score)
        for _, alias in _pairs(catalog)
    ]
    scored.sort(key=lambda s: -s[1])
    return [alias for alias, _ in scored[:max(max_suggestions, 0)]]
