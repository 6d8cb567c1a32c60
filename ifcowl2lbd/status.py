"""Append-only status channel for coarse conversion milestones."""

from __future__ import annotations

import logging
from typing import Callable

logger = logging.getLogger(__name__)

StatusListener = Callable[[str], None]


class StatusChannel:
    """Ordered, fire-and-forget milestone messages.

    Messages are kept in :attr:`messages` in posting order. Subscribers are
    called synchronously; a failing subscriber is logged and skipped so it
    can never abort a conversion.
    """

    def __init__(self) -> None:
        self.messages: list[str] = []
        self._listeners: list[StatusListener] = []

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def post(self, message: str) -> None:
        self.messages.append(message)
        logger.info("%s", message)
        for listener in self._listeners:
            try:
                listener(message)
            except Exception:
                logger.exception("Status listener %r failed", listener)
