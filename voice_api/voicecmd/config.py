from __future__ import annotations

import os
from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env (if present)
load_dotenv()


class Settings(BaseModel):
    # API key for this FastAPI server (sent via X-API-Key header)
    api_key: str = os.getenv("VOICECMD_API_KEY", "")

    # CORS origins (comma-separated or "*")
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # Catalog YAML; empty means the packaged catalogs.yml
    catalogs_file: str = os.getenv("VOICECMD_CATALOGS_FILE", "")

    # Matching thresholds
    command_threshold: float = float(os.getenv("VOICECMD_COMMAND_THRESHOLD", "0.65"))
    dashboard_threshold: float = float(os.getenv("VOICECMD_DASHBOARD_THRESHOLD", "0.6"))
    contact_threshold: float = float(os.getenv("VOICECMD_CONTACT_THRESHOLD", "0.6"))
    max_suggestions: int = int(os.getenv("VOICECMD_MAX_SUGGESTIONS", "3"))

    # Listener
    wake_words: str = os.getenv("VOICECMD_WAKE_WORDS", "hey,okay")
    listen_timeout: float = float(os.getenv("VOICECMD_LISTEN_TIMEOUT", "5.0"))

    # Speech output
    speech_rate: float = float(os.getenv("VOICECMD_SPEECH_RATE", "1.0"))
    speech_language: str = os.getenv("VOICECMD_SPEECH_LANGUAGE", "en-US")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def wake_word_list(self) -> list[str]:
        return [w.strip().lower() for w in self.wake_words.split(",") if w.strip()]

    def threshold_for(self, catalog_name: str) -> float:
        # The home screen accepts slightly looser matches than the others.
        if catalog_name == "global":
            return self.dashboard_threshold
        return self.command_threshold


settings = Settings()
