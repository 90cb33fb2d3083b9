"""Gunicorn configuration for the sponsorship webhook receiver.

Loaded by sponsorship_notify.main(), which embeds Gunicorn. All logs go to
stdout/stderr for Docker visibility via `docker compose logs`.
"""

import sys

# Bind to all interfaces on port 5000
bind = "0.0.0.0:5000"

# Worker configuration
# Threads let concurrent deliveries each run their own publish sequence;
# the dispatcher holds only read-only state.
workers = 1
worker_class = "gthread"
threads = 4
# Covers two outbound calls at the default 30s request timeout
timeout = 75
keepalive = 2

# All logs go to stdout/stderr for Docker container visibility
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Access log format
access_log_format = (
    '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s '
    '"%(f)s" "%(a)s" %(D)s %(p)s'
)
# %(h)s - Remote IP address
# %(t)s - Timestamp
# %(r)s - Request line (e.g., "POST / HTTP/1.1")
# %(s)s - HTTP status code
# %(b)s - Response size in bytes
# %(a)s - User-Agent header (GitHub-Hookshot/...)
# %(D)s - Request time in microseconds
# %(p)s - Process ID

capture_output = True
enable_stdio_inheritance = True

def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting Gunicorn for sponsorship webhook receiver")

def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Gunicorn server is ready to accept connections")

def on_exit(server):
    """Called just before exiting Gunicorn."""
    server.log.info("Shutting down Gunicorn")

def worker_abort(worker):
    """Called when a worker receives a SIGABRT signal."""
    worker.log.error("Worker received SIGABRT signal - likely timeout")

preload_app = False
reload = False

# Server mechanics
daemon = False  # Run in foreground for Docker
pidfile = None

# Request limits
limit_request_line = 4096
limit_request_fields = 100
limit_request_field_size = 8190

# Match the application's log format. The root logger is left alone so the
# file and Pushover handlers installed by main() survive dictConfig.
logconfig_dict = {
    'version': 1,
    'disable_existing_loggers': False,
    'loggers': {
        'gunicorn.error': {
            'level': 'INFO',
            'handlers': ['error_console'],
            'propagate': False,
            'qualname': 'gunicorn.error'
        },
        'gunicorn.access': {
            'level': 'INFO',
            'handlers': ['console'],
            'propagate': False,
            'qualname': 'gunicorn.access'
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'generic',
            'stream': sys.stdout
        },
        'error_console': {
            'class': 'logging.StreamHandler',
            'formatter': 'generic',
            'stream': sys.stderr
        },
    },
    'formatters': {
        'generic': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S',
            'class': 'logging.Formatter'
        }
    }
}
