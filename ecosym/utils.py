"""Utility functions for ecosym: hashing and timing."""

from __future__ import annotations

import hashlib
import logging
import time
from contextlib import contextmanager
from typing import Generator

logger = logging.getLogger(__name__)


def config_hash(yaml_text: str) -> str:
    """SHA-256 of a YAML config string (for tagging run output)."""
    return hashlib.sha256(yaml_text.encode('utf-8')).hexdigest()


@contextmanager
def timer(label: str = "") -> Generator[None, None, None]:
    """Context-manager timer. Logs elapsed time at INFO on exit."""
    start = time.perf_counter()
    yield
    elapsed = time.perf_counter() - start
    if label:
        logger.info("[%s] %.3fs", label, elapsed)
    else:
        logger.info("Elapsed: %.3fs", elapsed)
