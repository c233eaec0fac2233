import logging
import time
from typing import List, Optional


def setup_logger(name: str = "voicecmd", level: str = "INFO") -> logging.Logger:
    """Setup standardized logger for voice command handling with UTF-8 support."""
    logger = logging.getLogger(name)

    if not logger.handlers:  # Avoid duplicate handlers
        handler = logging.StreamHandler()
        # Transcripts may carry non-ASCII names
        if hasattr(handler.stream, 'reconfigure'):
            handler.stream.reconfigure(encoding='utf-8')

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger


def log_resolution(logger: logging.Logger,
                   session_id: str,
                   transcript: str,
                   catalog: str,
                   command: Optional[str],
                   confidence: float,
                   stage: Optional[str],
                   action: str,
                   duration_ms: float,
                   suggestions: Optional[List[str]] = None,
                   error: Optional[str] = None) -> None:
    """Log one resolved utterance in a structured format."""

    log_data = {
        "session_id": session_id,
        "transcript": _truncate(transcript),
        "catalog": catalog,
        "command": command,
        "confidence": round(confidence, 3),
        "stage": stage,
        "action": action,
        "duration_ms": round(duration_ms, 1)
    }

    if suggestions:
        log_data["suggestions"] = suggestions[:3]

    if error:
        log_data["error"] = error

    status_icon = "✅" if command else "❓"
    action_desc = action.replace("_", " ").title()

    if error:
        logger.error(f"❌ {action_desc}: {log_data}")
    else:
        logger.info(f"{status_icon} {action_desc}: {log_data}")


def _truncate(text: str, limit: int = 200) -> str:
    if len(text) > limit:
        return text[:limit - 3] + "..."
    return text


def create_session_id() -> str:
    """Create unique session ID for tracking."""
    return f"session_{int(time.time() * 1000)}"
