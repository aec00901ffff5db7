"""
Gunicorn configuration file for the GeoCSC API.

The application is preloaded, so the dataset is loaded and indexed once in
the master process and the read-only index is inherited by every forked
worker. A missing or invalid dataset stops the master before any worker
starts.

Usage:
    gunicorn -c GeoCSC/deployment/gunicorn_config.py GeoCSC.deployment.wsgi:app
"""
import multiprocessing
import os

from GeoCSC.config import get_config
from GeoCSC.utils.logging import LOG_FORMAT_ENV_VAR, get_logger, configure_logging

# JSON logs under gunicorn; set through the environment so that
# initialize_config() in the wsgi module keeps it
os.environ.setdefault(LOG_FORMAT_ENV_VAR, 'json')

configure_logging(
    level=os.environ.get('GEOCSC_LOG_LEVEL', 'info'),
    use_json=os.environ[LOG_FORMAT_ENV_VAR].lower() == 'json',
    log_file=os.environ.get('GEOCSC_LOG_FILE')
)

logger = get_logger("geocsc.gunicorn", {"component": "gunicorn"})

_api_settings = get_config().get_api_settings()

bind = f"{_api_settings['host']}:{_api_settings['port']}"

# A common formula is 2-4 x $(NUM_CORES)
workers = _api_settings['workers'] or multiprocessing.cpu_count() * 2 + 1

# Queries are pure in-memory lookups, threads share the index without locks
worker_class = "gthread"
threads = 4

# Build the index once in the master, before forking
preload_app = True

max_requests = 1000
max_requests_jitter = 50

timeout = 30

loglevel = "info"
accesslog = "-"
errorlog = "-"

proc_name = "geocsc_api"

def on_starting(server):
    """Called just before the master process is initialized."""
    logger.info(f"Starting GeoCSC API server on {bind} with {workers} workers")

def post_fork(server, worker):
    """Called in each worker right after it is forked."""
    logger.info(f"Forked worker {worker.pid}")

def worker_int(worker):
    """Handle worker SIGINT or SIGQUIT events."""
    logger.info(f"Worker {worker.pid} received INT or QUIT signal")

def on_exit(server):
    """Called just before exiting."""
    logger.info("Shutting down GeoCSC API server")
