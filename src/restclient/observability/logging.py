from __future__ import annotations

import logging
from typing import Sequence

from restclient.config.settings import get_settings

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
PACKAGE_LOGGER = "restclient"


def configure_logging(level: str | None = None, *, extra_handlers: Sequence[logging.Handler] | None = None) -> None:
    """Configure root logging and the ``restclient`` logger level.

    ``level`` falls back to the ``RESTCLIENT_LOG_LEVEL`` setting. Request tracing
    is emitted at DEBUG, so pass ``"DEBUG"`` to see every dispatch.
    """

    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved, format=DEFAULT_FORMAT)
    logging.getLogger(PACKAGE_LOGGER).setLevel(resolved)
    if extra_handlers:
        root = logging.getLogger()
        for handler in extra_handlers:
            if handler.formatter is None:
                handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
            root.addHandler(handler)


__all__ = ["DEFAULT_FORMAT", "PACKAGE_LOGGER", "configure_logging"]
