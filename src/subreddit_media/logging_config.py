"""Configure logging for the application."""

import logging
import sys

PACKAGE_LOGGER = "subreddit_media"
HANDLER_NAME = "subreddit_media.stderr"


def setup_logging(debug: bool = False) -> None:
    """Route package logs to the current stderr.

    Safe to call more than once: the handler installed by a previous call is
    replaced, so logs follow whatever ``sys.stderr`` is now.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for existing in list(package_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # httpx logs every request URL at INFO; keep it quiet unless debugging
    httpx_level = logging.DEBUG if debug else logging.WARNING
    logging.getLogger("httpx").setLevel(httpx_level)
    logging.getLogger("httpcore").setLevel(httpx_level)
