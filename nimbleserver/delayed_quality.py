"""Delays a disconnect decision until bad quality has persisted."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .connection_quality import ConnectionQuality

MAX_IMPEDING_DISCONNECT_COUNT = 180
NOTICE_INTERVAL = 60


@dataclass
class DelayedConnectionQuality:
    """Counts ticks of bad quality, recovering slowly on good ticks."""

    impeding_disconnect_counter: int = 0
    log: logging.Logger = field(
        default_factory=lambda: logging.getLogger(__name__), repr=False, compare=False
    )

    def reset(self) -> None:
        self.impeding_disconnect_counter = 0

    def tick(self, quality: ConnectionQuality) -> bool:
        """Return True to keep the connection, False to drop it."""
        if quality.should_disconnect():
            if self.impeding_disconnect_counter == 0:
                self.log.info(
                    "quality recommended dissolve for the first time (counter:%d), description: %s",
                    self.impeding_disconnect_counter,
                    quality.describe(),
                )
            self.impeding_disconnect_counter += 1
            if self.impeding_disconnect_counter > MAX_IMPEDING_DISCONNECT_COUNT:
                self.log.info(
                    "recommending dissolve (counter:%d), description: %s",
                    self.impeding_disconnect_counter,
                    quality.describe(),
                )
                return False
            if self.impeding_disconnect_counter % NOTICE_INTERVAL == 0:
                self.log.info(
                    "bad quality, considering dissolving (counter:%d). description: %s",
                    self.impeding_disconnect_counter,
                    quality.describe(),
                )
        elif self.impeding_disconnect_counter > 0:
            self.impeding_disconnect_counter -= 1
            if self.impeding_disconnect_counter % NOTICE_INTERVAL == 0:
                self.log.info(
                    "connection stabilizing (counter:%d)", self.impeding_disconnect_counter
                )
            if self.impeding_disconnect_counter == 0:
                self.log.info("connection has stabilized again")
        return True