# File: scribe/core/config/settings.py

import os
from pathlib import Path


class Settings:
    # --- Paths ---
    # scribe/core/config/settings.py -> scribe/core/config -> scribe/core -> scribe -> ROOT
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"
    MODELS_DIR: Path = DATA_DIR / "models"

    # --- Database ---
    POSTGRES_USER: str = os.getenv("POSTGRES_USER", "postgres")
    POSTGRES_PASSWORD: str = os.getenv("POSTGRES_PASSWORD", "password")
    POSTGRES_SERVER: str = os.getenv("POSTGRES_SERVER", "localhost")
    POSTGRES_PORT: str = os.getenv("POSTGRES_PORT", "5432")
    POSTGRES_DB: str = os.getenv("POSTGRES_DB", "scribe_db")

    @property
    def DATABASE_URL(self) -> str:
        # SQLite only when explicitly requested (tests, local demos).
        if os.getenv("USE_SQLITE", "false").lower() == "true":
            return "sqlite:///./scribe.db"

        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # --- Cloud Recognition (AssemblyAI) ---
    ASSEMBLYAI_API_KEY: str = os.getenv("ASSEMBLYAI_API_KEY", "")
    ASSEMBLYAI_BASE_URL: str = os.getenv("ASSEMBLYAI_BASE_URL", "https://api.assemblyai.com/v2")
    TRANSCRIPT_LANGUAGE: str = os.getenv("TRANSCRIPT_LANGUAGE", "zh")

    # --- Local Recognition (Whisper) ---
    WHISPER_MODEL_NAME: str = os.getenv("WHISPER_MODEL_NAME", "medium")
    WHISPER_DEVICE: str = "cuda" if os.getenv("USE_CUDA", "true").lower() == "true" else "cpu"

    # --- Rewriting Model (Gemini) ---
    GOOGLE_AI_API_KEY: str = os.getenv("GOOGLE_AI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")

    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "60"))

    # --- Polishing Pipeline ---
    POLISH_BATCH_SIZE: int = int(os.getenv("POLISH_BATCH_SIZE", "5"))
    POLISH_RATE_LIMIT_COOLDOWN: float = float(os.getenv("POLISH_RATE_LIMIT_COOLDOWN", "8.0"))
    POLISH_INTER_BATCH_DELAY: float = float(os.getenv("POLISH_INTER_BATCH_DELAY", "2.0"))

    def ensure_dirs(self):
        """Creates necessary data directories if they don't exist."""
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)
        self.MODELS_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
