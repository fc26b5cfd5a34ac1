import platform
from celery import Celery

from config import REDIS_URL

# Using 'solo' on macOS avoids fork-related SIGSEGV crashes
if platform.system() == "Darwin":
    pool_type = "solo"
else:
    pool_type = "prefork"

celery_app = Celery(
    "subtracker",
    broker=REDIS_URL,
    backend=REDIS_URL,
    include=["app.tasks.scheduler"]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    worker_pool=pool_type,
    worker_prefetch_multiplier=1,
    beat_schedule_filename="celery_beat_data/celerybeat-schedule",
)
