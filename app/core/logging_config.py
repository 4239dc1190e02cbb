# app/core/logging_config.py
import logging
import logging.config

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the API process and the RQ worker.
    Modules log through logging.getLogger(__name__).
    """
    global _configured
    if _configured:
        logging.getLogger().setLevel(level.upper())
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {
                "handlers": ["console"],
                "level": level.upper(),
            },
            "loggers": {
                # SQL echo is too noisy at INFO
                "sqlalchemy.engine": {"level": "WARNING"},
            },
        }
    )
    _configured = True
