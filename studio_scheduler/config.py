"""Environment-driven settings for the booking service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from studio_scheduler.domain.models import SeriesPolicy


@dataclass(frozen=True)
class Settings:
    series_policy: SeriesPolicy = SeriesPolicy.SKIP_CONFLICTS
    log_level: str = "INFO"
    load_fixtures: bool = False


def load_settings() -> Settings:
    """Read settings from ``BOOKING_*`` environment variables.

    An unknown ``BOOKING_SERIES_POLICY`` raises ``ValueError`` at start-up.
    """
    return Settings(
        series_policy=SeriesPolicy(
            os.getenv("BOOKING_SERIES_POLICY", SeriesPolicy.SKIP_CONFLICTS.value)
        ),
        log_level=os.getenv("BOOKING_LOG_LEVEL", "INFO").upper(),
        load_fixtures=os.getenv("BOOKING_LOAD_FIXTURES", "0") == "1",
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
