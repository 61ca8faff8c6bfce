import logging, logging.config, os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(thread)d %(module)s"
_DEFAULT_LEVEL = os.getenv("SNAP_LOG_LEVEL", "INFO").upper()

def setup_logging():
    # Configure root once
    logging.basicConfig(level=getattr(logging, _DEFAULT_LEVEL, logging.INFO), format=LOG_FORMAT)

    # Main app logger
    logger = logging.getLogger("SNAP")
    logger.setLevel(getattr(logging, _DEFAULT_LEVEL, logging.INFO))

    # Avoid duplicate console handlers
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(logging.Formatter(LOG_FORMAT))
        ch.setLevel(logger.level)
        logger.addHandler(ch)

    logger.propagate = False
    return logger

def configure_json_logging(level: str | None = None) -> None:
    """Switch the SNAP logger and uvicorn to JSON lines on stdout."""
    lvl = (level or _DEFAULT_LEVEL).upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "fmt": JSON_FORMAT,
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "":               {"handlers": ["console"], "level": lvl},
            "SNAP":           {"handlers": ["console"], "level": lvl, "propagate": False},
            "uvicorn":        {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.error":  {"handlers": ["console"], "level": "INFO", "propagate": False},
            "uvicorn.access": {"handlers": ["console"], "level": "INFO", "propagate": False},
        },
    })

def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("SNAP")
    return base.getChild(name) if name else base

def mask(value: str | None, keep: int = 6) -> str:
    """Shorten a secret for log lines: first `keep` chars plus an ellipsis."""
    if not value:
        return "<none>"
    return value[:keep] + "…" if len(value) > keep else "*" * len(value)

logger = setup_logging()
