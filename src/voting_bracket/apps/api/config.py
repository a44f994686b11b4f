import logging
import os

from voting_bracket.config import TournamentConfig


class Settings:
    JWT_SECRET_KEY = os.environ["SECRET_KEY"]
    ALGORITHM = "HS256"

    CORS_ALLOWED_ORIGINS = [
        origin
        for origin in os.environ.get("CORS_ALLOWED_ORIGIN", "").split(",")
        if origin
    ]

    HUMANIZE_LOGS = os.environ.get("HUMANIZE_LOGS", "false") == "true"
    LOG_LEVEL_STR = os.environ.get("LOG_LEVEL", "INFO")
    LOG_LEVEL = getattr(logging, LOG_LEVEL_STR.upper(), logging.INFO)

    USER_HISTORY_LIMIT = int(os.environ.get("USER_HISTORY_LIMIT", 10))

    TOURNAMENT = TournamentConfig()


settings = Settings()
