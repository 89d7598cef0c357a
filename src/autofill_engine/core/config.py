"""Configuration loading for the autofill engine."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_EVENT_DELAY = 0.005
DEFAULT_RESERVED_PREFIX = "autofill-"
DEFAULT_PROBLEM_SITES: Tuple[str, ...] = ("crowdtap.com",)
DEFAULT_TIMEOUT_MS = 15000

TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class AutofillConfig:
    """Runtime options shared by the identifier, executor and page loader."""

    event_delay: float = DEFAULT_EVENT_DELAY
    reserved_id_prefix: str = DEFAULT_RESERVED_PREFIX
    problematic_sites: Tuple[str, ...] = DEFAULT_PROBLEM_SITES
    force_overwrite: bool = False
    headless: bool = True
    navigation_timeout_ms: int = DEFAULT_TIMEOUT_MS

    def is_problematic_site(self, url: str) -> bool:
        lowered = (url or "").lower()
        return any(site and site.lower() in lowered for site in self.problematic_sites)


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in TRUTHY


def _env_sites(name: str) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return DEFAULT_PROBLEM_SITES
    return tuple(site.strip() for site in raw.split(",") if site.strip())


def load_configuration(
    *,
    event_delay: Optional[float] = None,
    force_overwrite: Optional[bool] = None,
    headless: Optional[bool] = None,
) -> AutofillConfig:
    """Builds an ``AutofillConfig`` from environment variables and overrides."""

    load_dotenv()  # Loads .env values if present

    delay_value = (
        event_delay
        if event_delay is not None
        else float(os.getenv("AUTOFILL_EVENT_DELAY", str(DEFAULT_EVENT_DELAY)))
    )

    return AutofillConfig(
        event_delay=max(delay_value, 0.0),
        reserved_id_prefix=os.getenv("AUTOFILL_RESERVED_PREFIX", DEFAULT_RESERVED_PREFIX),
        problematic_sites=_env_sites("AUTOFILL_PROBLEM_SITES"),
        force_overwrite=(
            force_overwrite
            if force_overwrite is not None
            else _env_flag("AUTOFILL_FORCE_OVERWRITE", False)
        ),
        headless=headless if headless is not None else _env_flag("HEADLESS", True),
        navigation_timeout_ms=int(os.getenv("AUTOFILL_TIMEOUT_MS", str(DEFAULT_TIMEOUT_MS))),
    )
