from __future__ import annotations

import time
from dataclasses import dataclass, field

from .commands import get_catalog
from .config import settings
from .listener import ListenerEventKind, TranscriptListener
from .logging_utils import create_session_id, log_resolution, setup_logger
from .resolver import get_suggestions, match_command
from .routing import Action, ClarificationGenerator, RoutingPolicy
from .speech import LogSpeechBackend, SpeechQueue

WAKE_ACK = "Yes, I am listening"
LISTEN_CANCELLED = "Listening cancelled"


@dataclass(frozen=True)
class VoiceAssistant:
    """Coordinates transcript gating, command resolution, routing and spoken feedback.

    - Listener turns raw recognition events into command text
    - Resolver maps the text to a command of the active screen's catalog
    - Routing policy decides between executing and clarifying
    - Unrecognized commands are answered with spoken suggestions

    Executing a command is left to the caller (the screen that owns the catalog).
    """

    speech: SpeechQueue = field(default_factory=lambda: SpeechQueue(LogSpeechBackend()))
    listener: TranscriptListener = field(default_factory=lambda: TranscriptListener(
        settings.wake_word_list(), settings.listen_timeout))
    routing_policy: RoutingPolicy = RoutingPolicy()
    clarification_generator: ClarificationGenerator = ClarificationGenerator()

    def __post_init__(self):
        object.__setattr__(self, 'logger', setup_logger("voicecmd.assistant", settings.log_level))

    def listen(self, transcript: str, is_final: bool, catalog_name: str) -> dict | None:
        """Feed one recognition event; returns a routed response once a command is heard."""
        event = self.listener.feed(transcript, is_final)

        if event.kind == ListenerEventKind.WAKE:
            self.speech.enqueue(WAKE_ACK)
        elif event.kind == ListenerEventKind.TIMEOUT:
            self.speech.enqueue(LISTEN_CANCELLED)
        elif event.kind == ListenerEventKind.COMMAND:
            return self.run(transcript=event.text, catalog_name=catalog_name)
        return None

    def run(self, *, transcript: str, catalog_name: str, threshold: float | None = None) -> dict:
        """Resolve one command transcript against a catalog."""

        session_id = create_session_id()
        start_time = time.time()

        try:
            catalog = get_catalog(catalog_name)
            cutoff = settings.threshold_for(catalog_name) if threshold is None else threshold

            # Step 1: match
            match = match_command(transcript, catalog, cutoff)

            # Step 2: routing decision
            decision = self.routing_policy.decide(transcript, match)

            response = {
                "action": decision.action.value,
                "success": decision.action == Action.EXECUTE,
                "catalog": catalog_name,
                "transcript": transcript,
                "command": decision.command,
                "confidence": decision.confidence,
                "matched_phrase": decision.matched_phrase,
                "stage": match.stage if match else None,
                "routing_reason": decision.reason,
                "user_message": None,
            }

            # Step 3: clarify with suggestions
            suggestions = None
            if decision.action == Action.CLARIFY:
                suggestions = get_suggestions(transcript, catalog, settings.max_suggestions)
                clarification = self.clarification_generator.generate(
                    suggestions, hints=catalog.command_ids()[:3]
                )
                response["suggestions"] = suggestions
                response["clarification"] = clarification
                response["user_message"] = clarification["question"]
                self.speech.enqueue(clarification["question"])

            duration_ms = (time.time() - start_time) * 1000
            log_resolution(
                self.logger, session_id, transcript, catalog_name,
                decision.command, decision.confidence, response["stage"],
                decision.action.value, duration_ms, suggestions
            )

            response["session_id"] = session_id
            response["duration_ms"] = duration_ms
            return response

        except Exception as e:
            duration_ms = (time.time() - start_time) * 1000

            log_resolution(
                self.logger, session_id, transcript, catalog_name, None, 0.0, None,
                "error", duration_ms, error=str(e)
            )

            return {
                "action": "error",
                "success": False,
                "catalog": catalog_name,
                "transcript": transcript,
                "error": str(e),
                "user_message": "Something went wrong, please try again.",
                "session_id": session_id,
                "duration_ms": duration_ms
            }
