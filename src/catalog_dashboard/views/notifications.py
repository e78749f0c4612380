"""Transient toast notifications raised by item-level actions."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class Toast:
    level: str
    message: str


class Notifier:
    def __init__(self) -> None:
        self.toasts: List[Toast] = []

    def success(self, message: str) -> None:
        logger.info(message)
        self.toasts.append(Toast("success", message))

    def error(self, message: str) -> None:
        logger.warning(message)
        self.toasts.append(Toast("error", message))

    def drain(self) -> List[Toast]:
        toasts, self.toasts = self.toasts, []
        return toasts
