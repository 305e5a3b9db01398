import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    # uvicorn's access log duplicates RequestLoggingMiddleware output.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
