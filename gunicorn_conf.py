import os

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
# The realtime message broker lives in the worker process; more than one worker
# only delivers pushes to sockets held by the sending worker.
workers = int(os.getenv("WEB_CONCURRENCY", 1))
worker_class = "uvicorn.workers.UvicornWorker"
timeout = int(os.getenv("GUNICORN_TIMEOUT", 30))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", 30))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", 5))

accesslog = "-"
errorlog = "-"
