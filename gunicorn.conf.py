"""Gunicorn configuration for production deployment."""

import os

# Server socket
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')

# Workers share one SQLite file: keep writers few, use threads for reads
workers = int(os.environ.get('GUNICORN_WORKERS', 2))
threads = int(os.environ.get('GUNICORN_THREADS', 4))
worker_class = 'gthread'

# Writers wait at most DATABASE_BUSY_TIMEOUT_MS for the SQLite lock
timeout = 30
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = os.environ.get('GUNICORN_ACCESS_LOG', 'logs/gunicorn-access.log')
errorlog = os.environ.get('GUNICORN_ERROR_LOG', 'logs/gunicorn-error.log')
loglevel = os.environ.get('GUNICORN_LOG_LEVEL', 'info')

proc_name = 'hotel-reservations'

# create_app runs once in the master; each worker opens its own connection
preload_app = True

max_requests = 1000
max_requests_jitter = 50
