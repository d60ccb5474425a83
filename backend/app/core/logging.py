import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
NOISY_LOGGERS = ("httpx", "httpcore", "opentelemetry")

_HANDLER_NAME = "modus-stdout"


def setup_logging(level: str = "INFO") -> None:
    """Send records to stdout at ``level``; calling again only updates the level."""
    root_logger = logging.getLogger()
    if not any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())

    # Upstream request logs duplicate the provider's own DEBUG lines
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
