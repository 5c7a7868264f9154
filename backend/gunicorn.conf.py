# gunicorn.conf.py — Production server configuration.
#
# Run from backend/ with:
#   gunicorn api.main:app -c gunicorn.conf.py
#
# Every worker builds its own GoRestClient in the app lifespan; workers share
# nothing, so scaling out needs no coordination.

import os

workers = int(os.getenv("WEB_CONCURRENCY", "4"))
worker_class = "uvicorn.workers.UvicornWorker"

bind = os.getenv("BIND", "0.0.0.0:8000")

# Logging: stdout/stderr for the process manager; structured JSON comes from core/logging.py
accesslog = "-"
errorlog  = "-"
loglevel  = "info"

# Timeouts. A get/delete that exhausts its retries spends 3 x 30s upstream
# timeout plus 3s of backoff, so the worker timeout must exceed that.
timeout          = 120
keepalive        = 5
graceful_timeout = 30
