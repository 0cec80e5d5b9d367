from __future__ import annotations

from typing import Literal

from ..logging import get_logger


class LogNotifier:
    """Notifier that writes user notifications to the application log."""

    def __init__(self) -> None:
        self.logger = get_logger("shelfwatch.notifications")

    def notify(
        self,
        title: str,
        description: str,
        variant: Literal["default", "destructive"] = "default",
    ) -> None:
        if variant == "destructive":
            self.logger.warning(f"{title}: {description}")
        else:
            self.logger.info(f"{title}: {description}")
