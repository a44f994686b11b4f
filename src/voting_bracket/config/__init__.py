import os


class CeleryConfig:
    @property
    def broker_url(self):
        return os.environ["CELERY_BROKER_URL"]

    @property
    def result_backend(self):
        return os.environ.get("CELERY_RESULT_BACKEND", self.broker_url)


class TournamentConfig:
    @property
    def default_rating(self):
        return int(os.environ.get("ELO_DEFAULT_SCORE", 1200))

    @property
    def k_factor(self):
        return int(os.environ.get("ELO_K_FACTOR", 32))

    @property
    def finale_k_factor(self):
        # The last match of a tournament moves ratings almost twice as far
        return int(os.environ.get("ELO_FINALE_K_FACTOR", 60))

    @property
    def stale_session_hours(self):
        return int(os.environ.get("STALE_SESSION_HOURS", 24))
