# gunicorn.conf.py
import os

# app factory; src/ must be importable (pip install . or PYTHONPATH=src)
wsgi_app = "SNAP.api.main:create_app()"

# networking
host = os.getenv("HOST", "0.0.0.0")
port = int(os.getenv("PORT", "8000"))
bind = f"{host}:{port}"

# workers
# one auth session and one set of synced collections per process, so a
# single worker unless the store is shared (SNAP_STORE_BACKEND=firestore)
workers = int(os.getenv("WEB_CONCURRENCY", "1"))
worker_class = "uvicorn.workers.UvicornWorker"
worker_tmp_dir = "/dev/shm"

# timeouts
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

# logging
accesslog = "-"   # stdout
errorlog  = "-"   # stderr
loglevel = os.getenv("SNAP_LOG_LEVEL", "info").lower()
capture_output = True

LOG_FMT = "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(thread)d %(module)s"
logconfig_dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "fmt": LOG_FMT,
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": os.getenv("SNAP_LOG_LEVEL", "INFO").upper(), "handlers": ["console"]},
    "loggers": {
        "SNAP":           {"level": os.getenv("SNAP_LOG_LEVEL", "INFO").upper(), "handlers": ["console"], "propagate": False},
        "uvicorn":        {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.error":  {"level": "INFO", "handlers": ["console"], "propagate": False},
        "uvicorn.access": {"level": "INFO", "handlers": ["console"], "propagate": False},
        # Firestore watch streams are chatty at INFO
        "google.cloud.firestore_v1.watch": {"level": "WARNING", "handlers": ["console"], "propagate": False},
    },
}
