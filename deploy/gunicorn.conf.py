bind = "127.0.0.1:8000"
# One worker: the session store is process-wide state.
workers = 1
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "academy_dashboard.main:app"
timeout = 60
graceful_timeout = 30
keepalive = 5
loglevel = "info"
accesslog = "-"
errorlog = "-"
