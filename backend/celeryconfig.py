"""
Celery configuration for the document build workers.

Loaded by `celery_app.config_from_object("celeryconfig")` in doccraft/tasks/__init__.py.
Broker and result-backend URLs come from doccraft settings
(CELERY_BROKER_URL, CELERY_RESULT_BACKEND), defaulting to localhost.
"""

from doccraft.core.config import settings as _settings

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = _settings.CELERY_BROKER_URL
result_backend = _settings.CELERY_RESULT_BACKEND

# ═══════════════════════════════════════════════════════════
#  Serialization — JSON only
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

# ═══════════════════════════════════════════════════════════
#  Timezone
# ═══════════════════════════════════════════════════════════

timezone = "UTC"
enable_utc = True

# ═══════════════════════════════════════════════════════════
#  Task Execution
# ═══════════════════════════════════════════════════════════

# Acknowledge tasks after they complete so a worker crash re-queues them
task_acks_late = True
task_reject_on_worker_lost = True

# One build at a time per worker process; renders are long and CPU-bound
worker_prefetch_multiplier = 1

# Must stay above RENDER_TIMEOUT_SECONDS so the renderer is killed first
task_soft_time_limit = 900    # 15 min: raises SoftTimeLimitExceeded
task_time_limit = 960         # 16 min: hard kill

# Builds are not retried
task_max_retries = 0

# ═══════════════════════════════════════════════════════════
#  Result Expiry
# ═══════════════════════════════════════════════════════════

result_expires = 86400

# ═══════════════════════════════════════════════════════════
#  Worker Settings
# ═══════════════════════════════════════════════════════════

worker_max_tasks_per_child = 200

# Enable with: celery -A doccraft.tasks worker -E
worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════
# Run dedicated build workers:
#   celery -A doccraft.tasks worker -Q builds

task_routes = {
    "doccraft.tasks.build_tasks.*": {"queue": "builds"},
}

task_default_queue = "default"
