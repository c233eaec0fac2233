from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Deque, List, Optional, Protocol

from .config import settings
from .logging_utils import setup_logger

SpeechCallback = Callable[[], None]


@dataclass(frozen=True)
class SpeechOptions:
    rate: float = 1.0
    language: str = "en-US"


class SpeechBackend(Protocol):
    """Text-to-speech engine. Must call ``on_done`` once playback ends or fails."""

    def speak(self, text: str, options: SpeechOptions, on_done: SpeechCallback) -> None: ...

    def stop(self) -> None: ...


class LogSpeechBackend:
    """Backend for hosts without audio output: logs the text and finishes at once."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.log = logger or setup_logger("voicecmd.speech", settings.log_level)

    def speak(self, text: str, options: SpeechOptions, on_done: SpeechCallback) -> None:
        self.log.info(f"🔊 [{options.language} x{options.rate}] {text}")
        on_done()

    def stop(self) -> None:
        pass


@dataclass
class SpeechRequest:
    text: str
    options: SpeechOptions
    done: threading.Event = field(default_factory=threading.Event)
    cancelled: bool = False


class SpeechQueue:
    """Serialized speech output with start/end hooks.

    Requests play one at a time, in order, on a single worker thread. Start
    hooks let a listener pause recognition while the app is talking; end hooks
    resume it.
    """

    def __init__(self, backend: SpeechBackend,
                 default_options: Optional[SpeechOptions] = None,
                 logger: Optional[logging.Logger] = None):
        self.backend = backend
        self.default_options = default_options or SpeechOptions(
            rate=settings.speech_rate, language=settings.speech_language
        )
        self.log = logger or setup_logger("voicecmd.speech", settings.log_level)

        self._lock = threading.Lock()
        self._wakeup = threading.Condition(self._lock)
        self._queue: Deque[SpeechRequest] = deque()
        self._current: Optional[SpeechRequest] = None
        self._current_finished: Optional[threading.Event] = None
        self._speaking = threading.Event()
        self._start_callbacks: List[SpeechCallback] = []
        self._end_callbacks: List[SpeechCallback] = []
        self._worker: Optional[threading.Thread] = None
        self._closed = False

    # --- hooks ---

    def on_start(self, callback: SpeechCallback) -> None:
        self._start_callbacks.append(callback)

    def on_end(self, callback: SpeechCallback) -> None:
        self._end_callbacks.append(callback)

    def remove_callback(self, callback: SpeechCallback) -> None:
        self._start_callbacks = [cb for cb in self._start_callbacks if cb is not callback]
        self._end_callbacks = [cb for cb in self._end_callbacks if cb is not callback]

    def clear_callbacks(self) -> None:
        self._start_callbacks = []
        self._end_callbacks = []

    # --- state ---

    @property
    def is_speaking(self) -> bool:
        return self._speaking.is_set()

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._queue)

    # --- queue ---

    def enqueue(self, text: str, options: Optional[SpeechOptions] = None) -> SpeechRequest:
        """Queue ``text``; the returned request's ``done`` is set once it played or was cancelled."""
        request = SpeechRequest(text=text, options=options or self.default_options)
        with self._wakeup:
            if self._closed:
                request.cancelled = True
                request.done.set()
                return request
            self._queue.append(request)
            self._ensure_worker()
            self._wakeup.notify()
        return request

    def cancel_all(self) -> None:
        """Stop the current utterance and drop everything queued."""
        with self._lock:
            dropped = list(self._queue)
            self._queue.clear()
            for request in dropped:
                request.cancelled = True
            current, finished = self._current, self._current_finished
            if current is not None:
                current.cancelled = True

        for request in dropped:
            request.done.set()

        try:
            self.backend.stop()
        except Exception as e:
            self.log.error(f"Stop speech error: {e}")

        if finished is not None:
            finished.set()
        self._speaking.clear()
        self._fire(self._end_callbacks)
        self.log.debug(f"Speech cancelled ({len(dropped)} queued dropped)")

    def close(self, timeout: float | None = 2.0) -> None:
        """Cancel everything and stop the worker thread."""
        with self._wakeup:
            self._closed = True
            self._wakeup.notify_all()
        self.cancel_all()
        worker = self._worker
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout)
        self._worker = None

    def _ensure_worker(self) -> None:
        if self._worker is None or not self._worker.is_alive():
            self._worker = threading.Thread(target=self._run, name="speech-queue", daemon=True)
            self._worker.start()

    def _run(self) -> None:
        while True:
            with self._wakeup:
                while not self._queue and not self._closed:
                    self._wakeup.wait()
                if self._closed:
                    return
                request = self._queue.popleft()
                finished = threading.Event()
                self._current, self._current_finished = request, finished
            self._play(request, finished)

    def _play(self, request: SpeechRequest, finished: threading.Event) -> None:
        with self._lock:
            if not request.cancelled:
                self._speaking.set()
        try:
            if not request.cancelled:
                self._fire(self._start_callbacks)
            # cancel_all() may have run while the start hooks were busy
            with self._lock:
                skip = request.cancelled
            if not skip:
                self.backend.speak(request.text, request.options, finished.set)
                finished.wait()
                if request.cancelled:
                    # stop() may have reached the backend before speak() did
                    self.backend.stop()
        except Exception as e:
            self.log.error(f"Speech error: {e}")
        finally:
            with self._lock:
                self._current, self._current_finished = None, None
            if not request.cancelled:
                self._speaking.clear()
                self._fire(self._end_callbacks)
            request.done.set()

    def _fire(self, callbacks: List[SpeechCallback]) -> None:
        for cb in list(callbacks):
            try:
                cb()
            except Exception as e:
                self.log.warning(f"Speech callback failed: {e}")
