# Gunicorn configuration optimized for Render free tier
import os

# Application factory
wsgi_app = "app:create_app()"

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', '10000')}"

# Worker processes
# Expenses and the Sheets connection live in process memory: exactly one worker
workers = 1
worker_class = "gthread"
threads = 4
# Longer than SHEETS_TIMEOUT so a slow Sheets call fails cleanly instead of killing the worker
timeout = 120
keepalive = 10

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"

# Process naming
proc_name = "expense_tracker"

worker_tmp_dir = "/dev/shm"  # Use shared memory for tmp files


def when_ready(server):
    server.log.info("Server is ready. Spawning workers")


def worker_int(worker):
    worker.log.info("worker received INT or QUIT signal")


def pre_fork(server, worker):
    server.log.info("Worker spawned (pid: %s)", worker.pid)
