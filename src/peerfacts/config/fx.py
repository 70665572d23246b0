"""Display currency conversion settings."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from peerfacts.domain.resolution import DEFAULT_USD_TO_HKD

from .errors import ConfigurationError

FX_RATE_ENV = "PEERFACTS_USD_HKD_RATE"


@dataclass(frozen=True, slots=True)
class FxRateConfig:
    usd_to_hkd: float = DEFAULT_USD_TO_HKD


def get_fx_config() -> FxRateConfig:
    raw = os.getenv(FX_RATE_ENV)
    if raw is None or not raw.strip():
        return FxRateConfig()
    try:
        rate = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{FX_RATE_ENV} must be a number, got {raw!r}") from exc
    if not math.isfinite(rate) or rate <= 0:
        raise ConfigurationError(f"{FX_RATE_ENV} must be positive, got {raw!r}")
    return FxRateConfig(usd_to_hkd=rate)
