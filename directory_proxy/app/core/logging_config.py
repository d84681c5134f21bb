"""
Logging setup for the directory proxy.

Everything the proxy reports goes through module loggers
(``logging.getLogger(__name__)``): upstream failures on ``/directory``
and ``/refresh-groups``, media references that stay unresolved, cache
files that cannot be read or written and the outcome of edge cache
invalidation.  ``setup_logging`` routes those records to stderr and,
when ``LOG_FILE`` is set, to a file as well.  ``create_app`` calls it
on every build, so only the first call configures anything.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Attach the proxy's handlers to the root logger once.

    Parameters
    ----------
    level : str
        ``LOG_LEVEL`` from the settings.  Unknown names fall back to
        ``INFO``.
    logfile : Optional[str]
        ``LOG_FILE`` from the settings.  Its directory is created on
        demand; an empty value means stderr only.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(numeric_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # httpx logs every request at INFO; one line per media lookup is noise.
    logging.getLogger("httpx").setLevel(max(numeric_level, logging.WARNING))
