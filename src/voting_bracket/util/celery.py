from celery import Celery, signals

from voting_bracket.config import CeleryConfig

DEFAULT_WORKER_CONF = dict(
    # Maintenance tasks are short; anything past an hour is stuck
    task_time_limit=3600,
    task_soft_time_limit=3300,
    worker_send_task_events=True,
    broker_heartbeat=300,
    broker_connection_timeout=30,
    # Rebuilding ratings twice in a row is harmless but wasteful
    task_acks_late=False,
    task_reject_on_worker_lost=True,
    result_expires=172800,
    worker_prefetch_multiplier=1,
    broker_connection_retry_on_startup=True,
    worker_hijack_root_logger=False,
    task_default_queue="default",
)


@signals.setup_logging.connect
def on_setup_logging(**kwargs):
    pass


def make_worker_celery_app(conf=None):
    celery_config = CeleryConfig()
    app = Celery(
        broker=celery_config.broker_url,
        backend=celery_config.result_backend,
    )

    conf_update = dict(DEFAULT_WORKER_CONF)
    conf_update.update(conf or {})
    app.conf.update(conf_update)
    return app

