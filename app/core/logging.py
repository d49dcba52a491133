import logging, sys

APP_LOGGER = "products-api"


def setup_logging(level: str = "INFO") -> logging.Logger:
    level = (level or "INFO").upper()
    root = logging.getLogger()
    if not root.handlers:
        root.setLevel(level)
        h = logging.StreamHandler(sys.stdout)
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        h.setFormatter(fmt)
        root.addHandler(h)

    # uvicorn își configurează propriile loggere; le aliniem la LOG_LEVEL
    for _name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(_name).setLevel(level)

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)
    return logger
