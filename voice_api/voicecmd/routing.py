from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .models import MatchResult


class Action(str, Enum):
    """What the caller should do with a transcript."""
    EXECUTE = "execute"           # Run the matched command
    CLARIFY = "clarify"           # Offer "did you mean" suggestions
    REJECT = "reject"             # Nothing was said


@dataclass(frozen=True)
class RoutingDecision:
    """Result of routing policy decision."""
    action: Action
    command: Optional[str] = None
    confidence: float = 0.0
    matched_phrase: Optional[str] = None
    reason: Optional[str] = None


@dataclass(frozen=True)
class RoutingPolicy:
    """Decide between executing a match and asking the user again.

    The resolver has already applied its threshold, so any match executes.
    """

    def decide(self, transcript: str, match: MatchResult | None) -> RoutingDecision:
        if not (transcript or "").strip():
            return RoutingDecision(action=Action.REJECT, reason="Empty transcript")

        if match is None or match.command is None:
            return RoutingDecision(action=Action.CLARIFY, reason="No command matched")

        return RoutingDecision(
            action=Action.EXECUTE,
            command=match.command,
            confidence=match.confidence,
            matched_phrase=match.matched_phrase,
            reason=f"Matched by {match.stage or 'unknown'} stage",
        )


def _spoken_list(items: list[str]) -> str:
    if len(items) <= 1:
        return "".join(items)
    return f"{', '.join(items[:-1])}, or {items[-1]}"


@dataclass(frozen=True)
class ClarificationGenerator:
    """Build the spoken prompt for an utterance that matched nothing."""

    prefix: str = "I didn't understand that."
    spoken_suggestions: int = 2
    default_hints: tuple[str, ...] = field(default=("navigate", "scan", "emergency"))

    def generate(self, suggestions: list[str], hints: Optional[list[str]] = None) -> dict:
        """Return ``{"question", "options"}`` for the suggestions.

        Only the first ``spoken_suggestions`` are read out; all are returned
        as options. Without suggestions the prompt lists ``hints`` instead.
        """
        if suggestions:
            spoken = suggestions[:self.spoken_suggestions]
            question = f"{self.prefix} Did you mean: {', or '.join(spoken)}?"
        else:
            question = f"{self.prefix} Try saying: {_spoken_list(list(hints or self.default_hints))}."

        return {
            "question": question,
            "options": list(suggestions),
        }
