import pytest

from voicecmd.assistant import LISTEN_CANCELLED, WAKE_ACK, VoiceAssistant
from voicecmd.config import settings
from voicecmd.listener import ListenerEventKind, TranscriptListener
from voicecmd.models import MatchResult
from voicecmd.routing import Action, ClarificationGenerator, RoutingPolicy
from voicecmd.speech import SpeechQueue

WAIT = 2.0


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class RecordingBackend:
    def __init__(self):
        self.spoken = []

    def speak(self, text, options, on_done):
        self.spoken.append(text)
        on_done()

    def stop(self):
        pass


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def listener(clock):
    return TranscriptListener(("hey", "okay"), timeout=5.0, clock=clock)


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def assistant(backend, listener):
    assistant = VoiceAssistant(speech=SpeechQueue(backend), listener=listener)
    yield assistant
    assistant.speech.close()


def _drain(assistant):
    # Anything enqueued before this marker has been played once it is done
    assert assistant.speech.enqueue("").done.wait(WAIT)


class TestTranscriptListener:
    def test_ignores_without_wake_word(self, listener):
        assert listener.feed("scan", True).kind == ListenerEventKind.IGNORED
        assert not listener.armed

    def test_wake_then_command(self, listener):
        assert listener.feed("Hey", False).kind == ListenerEventKind.WAKE
        assert listener.feed("hey sc", False).kind == ListenerEventKind.IGNORED
        event = listener.feed("hey scan", True)
        assert event.kind == ListenerEventKind.COMMAND
        assert event.text == "scan"
        assert not listener.armed

    def test_wake_word_alone_is_not_a_command(self, listener):
        listener.feed("okay", False)
        assert listener.feed("okay", True).kind == ListenerEventKind.IGNORED

    def test_timeout(self, listener, clock):
        listener.feed("hey", False)
        clock.now = 5.5
        assert listener.feed("scan", True).kind == ListenerEventKind.TIMEOUT
        assert not listener.armed

    def test_wake_word_after_timeout_rearms(self, listener, clock):
        listener.feed("hey", False)
        clock.now = 5.5
        event = listener.feed("hey scan", False)
        assert event.kind == ListenerEventKind.WAKE
        assert listener.armed
        event = listener.feed("hey scan", True)
        assert event.kind == ListenerEventKind.COMMAND
        assert event.text == "scan"

    def test_expire(self, listener, clock):
        listener.arm()
        clock.now = 2.0
        assert not listener.expire()
        clock.now = 6.0
        assert listener.expire()

    def test_tap_to_speak(self, listener):
        listener.arm()
        event = listener.feed("navigate", True)
        assert event.kind == ListenerEventKind.COMMAND
        assert event.text == "navigate"


class TestRouting:
    def test_reject_empty(self):
        assert RoutingPolicy().decide("  ", None).action == Action.REJECT

    def test_clarify_without_match(self):
        assert RoutingPolicy().decide("zzzz", None).action == Action.CLARIFY

    def test_execute_match(self):
        match = MatchResult(command="scan", confidence=0.9, matched_phrase="scan", stage="overlap")
        decision = RoutingPolicy().decide("scan now", match)
        assert decision.action == Action.EXECUTE
        assert decision.command == "scan"
        assert decision.confidence == 0.9

    def test_clarification_with_suggestions(self):
        out = ClarificationGenerator().generate(["scan", "camera", "see"])
        assert out["question"] == "I didn't understand that. Did you mean: scan, or camera?"
        assert out["options"] == ["scan", "camera", "see"]

    def test_clarification_without_suggestions(self):
        out = ClarificationGenerator().generate([])
        assert out["question"] == "I didn't understand that. Try saying: navigate, scan, or emergency."

    def test_clarification_custom_hints(self):
        out = ClarificationGenerator().generate([], hints=["pause", "exit"])
        assert out["question"].endswith("Try saying: pause, or exit.")


class TestVoiceAssistant:
    def test_execute(self, assistant, backend):
        response = assistant.run(transcript="navigate", catalog_name="global")
        assert response["action"] == "execute"
        assert response["success"] is True
        assert response["command"] == "navigate"
        assert response["confidence"] == 1.0
        assert response["stage"] == "exact"
        assert "session_id" in response

    def test_clarify_speaks_suggestions(self, assistant, backend):
        response = assistant.run(transcript="zzzz", catalog_name="global")
        assert response["action"] == "clarify"
        assert response["success"] is False
        assert len(response["suggestions"]) == 3
        assert response["user_message"].startswith("I didn't understand that. Did you mean:")
        _drain(assistant)
        assert response["user_message"] in backend.spoken

    def test_reject_empty(self, assistant):
        assert assistant.run(transcript="", catalog_name="global")["action"] == "reject"

    def test_unknown_catalog(self, assistant):
        response = assistant.run(transcript="scan", catalog_name="settings")
        assert response["action"] == "error"
        assert response["success"] is False

    def test_thresholds(self):
        assert settings.threshold_for("global") == pytest.approx(0.6)
        assert settings.threshold_for("scan") == pytest.approx(0.65)

    def test_home_screen_threshold(self, assistant, monkeypatch):
        monkeypatch.setattr("voicecmd.config.settings.dashboard_threshold", 1.0)
        assert assistant.run(transcript="skan", catalog_name="global")["action"] == "clarify"
        assert assistant.run(transcript="skan", catalog_name="scan")["action"] == "execute"

    def test_listen_flow(self, assistant, backend):
        assert assistant.listen("hey", False, "scan") is None
        response = assistant.listen("hey barcode", True, "scan")
        assert response["command"] == "barcode"
        _drain(assistant)
        assert WAKE_ACK in backend.spoken

    def test_listen_timeout(self, assistant, backend, clock):
        assistant.listen("okay", False, "global")
        clock.now = 10.0
        assert assistant.listen("scan", True, "global") is None
        _drain(assistant)
        assert LISTEN_CANCELLED in backend.spoken
