"""Project logger.

Everything logs through the ``weeksheet`` logger (or a child obtained with
``logging.getLogger(__name__)``), so one handler set here covers the package.
"""
from __future__ import annotations

import logging
import sys
import uuid

from weeksheet.config import settings

_SESSION_ID = uuid.uuid4().hex[:8]


def get_session_id() -> str:
    """Short id of this process, stamped on every log line."""
    return _SESSION_ID


def _configure() -> logging.Logger:
    log = logging.getLogger("weeksheet")
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(
            f"%(asctime)s [{_SESSION_ID}] %(levelname)s %(name)s: %(message)s"
        ))
        log.addHandler(handler)
    log.setLevel(settings.LOG_LEVEL.upper())
    return log


logger = _configure()
