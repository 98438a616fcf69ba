# src/flipforge/services/feedback.py
from __future__ import annotations

import time
from typing import Callable

from flipforge.adapters.config import config
from flipforge.adapters.logging_utils import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]
ClipboardWriter = Callable[[str], object]


class CopyFeedback:
    """
    Short-lived "Copied ✓" state, keyed by what was copied.

    Presentation only: never persisted, carries no deal state, and expires on
    its own. Expiry is checked lazily against `clock`, so no timers run.
    """

    def __init__(self, ttl_s: float | None = None, clock: Clock = time.monotonic) -> None:
        self._ttl_s = config.COPY_FEEDBACK_SECONDS if ttl_s is None else ttl_s
        self._clock = clock
        self._until: dict[str, float] = {}

    def mark(self, key: str, ttl_s: float | None = None) -> None:
        ttl = self._ttl_s if ttl_s is None else ttl_s
        self._until[key] = self._clock() + ttl

    def clear(self, key: str) -> None:
        self._until.pop(key, None)

    def is_active(self, key: str) -> bool:
        until = self._until.get(key)
        if until is None:
            return False
        if self._clock() >= until:
            del self._until[key]
            return False
        return True

    def label(self, key: str, idle_text: str, copied_text: str = "Copied ✓") -> str:
        return copied_text if self.is_active(key) else idle_text


def copy_with_feedback(
    writer: ClipboardWriter,
    text: str,
    feedback: CopyFeedback,
    key: str,
    ttl_s: float | None = None,
) -> bool:
    """
    Copy `text` and flag `key` as copied.

    A failing clipboard is the one error we absorb: it leaves the key in its
    "not copied" state instead of raising.
    """
    try:
        writer(text)
    except Exception as e:
        logger.debug("clipboard_copy_failed", extra={"context": {"key": key, "error": type(e).__name__}})
        feedback.clear(key)
        return False
    feedback.mark(key, ttl_s)
    return True
