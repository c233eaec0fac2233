from __future__ import annotations

from .models import ParsedCommand
from .resolver import CatalogLike, match_command

# Action matching in compound utterances always uses the stock threshold.
ACTION_THRESHOLD = 0.65


def parse_complex_command(input: str, catalog: CatalogLike) -> ParsedCommand:
    """Split an utterance into an action and its free-text parameter.

    "call lucy" -> action for "call", parameter "lucy". Every input word that
    also appears in the matched alias is dropped; what remains is the parameter.
    """
    normalized = (input or "").lower().strip()

    action = match_command(normalized, catalog, ACTION_THRESHOLD)
    if action is None:
        return ParsedCommand(action=None, parameter=None, confidence=0.0)

    words = normalized.split()
    if len(words) <= 1:
        return ParsedCommand(action=action.command, parameter=None, confidence=action.confidence)

    action_words = set(action.matched_phrase.lower().split())
    parameter = " ".join(w for w in words if w not in action_words)

    return ParsedCommand(
        action=action.command,
        parameter=parameter or None,
        confidence=action.confidence,
    )
