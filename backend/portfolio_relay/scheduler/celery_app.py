from celery import Celery

from portfolio_relay.core.config import settings

app = Celery("portfolio_relay")
app.conf.broker_url = settings.CELERY_BROKER_URL
app.conf.result_backend = settings.CELERY_RESULT_BACKEND
app.conf.timezone = settings.CELERY_TIMEZONE
app.conf.enable_utc = True

app.conf.imports = ["portfolio_relay.tasks.refresh"]

app.conf.beat_schedule = {
    "refresh-portfolio-cache": {
        "task": "portfolio_relay.tasks.refresh.refresh_portfolio_cache",
        "schedule": float(settings.REFRESH_INTERVAL_SECONDS),
    },
}
