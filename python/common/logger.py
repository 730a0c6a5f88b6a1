"""Central level-based logger (standard library `logging`).

Records carry the thread name, so output from the keypair-generator worker
is distinguishable from the caller thread.

Env:
- LOG_LEVEL: DEBUG|INFO|WARNING|ERROR|CRITICAL (default: INFO)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

# Key generation logs from its own worker thread
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] - %(message)s"


def _level_from_env() -> int:
    raw = (os.getenv("LOG_LEVEL") or "INFO").upper().strip()
    return getattr(logging, raw, logging.INFO)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a configured logger.

    This configures the root logger once (idempotent).
    """
    level = _level_from_env()
    root = logging.getLogger()
    if not getattr(root, "_certgen_configured", False):
        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
        )
        setattr(root, "_certgen_configured", True)
    root.setLevel(level)
    return logging.getLogger(name or "certgen")
