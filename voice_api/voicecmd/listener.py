from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence


class ListenerEventKind(str, Enum):
    IGNORED = "ignored"
    WAKE = "wake"
    COMMAND = "command"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class ListenerEvent:
    kind: ListenerEventKind
    text: Optional[str] = None


class TranscriptListener:
    """Gate speech-recognition output behind a wake word.

    Fed with ``(transcript, is_final)`` pairs. While idle, any transcript that
    contains a wake word arms the listener. While armed, the next final
    transcript becomes a command. An armed listener that hears nothing final
    within ``timeout`` seconds disarms itself; a late transcript carrying a
    wake word arms it again instead of being dropped.
    """

    def __init__(self, wake_words: Sequence[str] = ("hey", "okay"),
                 timeout: float = 5.0,
                 clock: Callable[[], float] = time.monotonic):
        self.wake_words = [w.lower() for w in wake_words if w]
        self.timeout = timeout
        self._clock = clock
        self._armed_at: Optional[float] = None

    @property
    def armed(self) -> bool:
        return self._armed_at is not None

    def arm(self) -> None:
        """Start waiting for a command without a wake word (tap to speak)."""
        self._armed_at = self._clock()

    def disarm(self) -> None:
        self._armed_at = None

    def feed(self, transcript: str, is_final: bool) -> ListenerEvent:
        text = (transcript or "").lower().strip()

        # A lapsed window only matters if this transcript doesn't re-arm it.
        expired = self.expire()

        if not self.armed:
            if any(w in text for w in self.wake_words):
                self.arm()
                return ListenerEvent(ListenerEventKind.WAKE, text)
            if expired:
                return ListenerEvent(ListenerEventKind.TIMEOUT)
            return ListenerEvent(ListenerEventKind.IGNORED)

        if not is_final:
            return ListenerEvent(ListenerEventKind.IGNORED)

        self.disarm()
        command = self.strip_wake_word(text)
        if not command:
            return ListenerEvent(ListenerEventKind.IGNORED)
        return ListenerEvent(ListenerEventKind.COMMAND, command)

    def expire(self) -> bool:
        """Disarm if the listen window has passed; True when it did."""
        if self.armed and self._clock() - self._armed_at > self.timeout:
            self.disarm()
            return True
        return False

    def strip_wake_word(self, text: str) -> str:
        # Only the first occurrence of the first wake word present is removed.
        lowered = text.lower()
        for word in self.wake_words:
            if word in lowered:
                return lowered.replace(word, "", 1).strip()
        return lowered.strip()
