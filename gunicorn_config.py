"""
Gunicorn configuration file for the Wyrenow backend
Handles worker crashes, timeouts, and graceful shutdowns

- Worker count scales with CPU cores unless GUNICORN_WORKERS is set
- Placements are short transactions; long requests are tree reads of very large subtrees
- All settings can be overridden via environment variables
"""
import multiprocessing
import os

# Server socket
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
backlog = 2048

# Worker processes
workers = int(os.environ.get("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
worker_connections = 1000
# Request timeout in seconds; must cover a full-tree read on the largest subtree
timeout = int(os.environ.get("GUNICORN_TIMEOUT", 60))
keepalive = 5

capture_output = True
enable_stdio_inheritance = False

# Worker lifecycle
max_requests = 1000  # Restart worker after this many requests
max_requests_jitter = 50
preload_app = False

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("GUNICORN_LOG_LEVEL", "info")
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "wyrenow_backend"

# Server mechanics
daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None

graceful_timeout = 30

# Shared memory for worker heartbeat files when available (Linux only)
if os.path.exists("/dev/shm"):
    worker_tmp_dir = "/dev/shm"
else:
    worker_tmp_dir = None


def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting Wyrenow backend Gunicorn server")


def on_reload(server):
    """Called to recycle workers during a reload via SIGHUP."""
    server.log.info("Reloading Wyrenow backend Gunicorn server")


def when_ready(server):
    server.log.info("Wyrenow backend Gunicorn server is ready. Spawning workers")


def worker_int(worker):
    worker.log.info("Worker received INT or QUIT signal")


def on_exit(server):
    server.log.info("Shutting down Wyrenow backend Gunicorn server")


def worker_abort(worker):
    """Called when a worker times out or is killed."""
    import traceback
    worker.log.warning(f"Worker {worker.pid} aborted (timeout or killed)")
    worker.log.warning(f"Worker abort traceback:\n{traceback.format_exc()}")


def worker_exit(server, worker):
    server.log.info(f"Worker {worker.pid} exited")
