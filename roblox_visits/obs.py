from __future__ import annotations

import json
import logging
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

_logger = logging.getLogger("obs")

# Per-request correlation id
_rid_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=_FORMAT)
    root.setLevel(level.upper())


def new_request_id() -> str:
    rid = uuid.uuid4().hex[:16]
    _rid_var.set(rid)
    return rid


def get_request_id() -> Optional[str]:
    return _rid_var.get()


_LEVELS = {"info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


def log_event(event: str, level: str = "info", **fields: Any) -> None:
    """Log ``event`` as a single JSON line on the ``obs`` logger.

    Every line carries ts (epoch ms), level, event and, inside a request, the
    correlation id as rid. Extra keyword fields are appended unless None.
    """
    payload: Dict[str, Any] = {"ts": int(time.time() * 1000), "level": level, "event": event}
    rid = get_request_id()
    if rid:
        payload["rid"] = rid
    payload.update((k, v) for k, v in fields.items() if v is not None)
    _logger.log(_LEVELS.get(level, logging.INFO), json.dumps(payload, ensure_ascii=False, default=str))
