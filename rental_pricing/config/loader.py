"""
Configuration management and loading.

Holds the platform economics (default fee, currency, duration ceiling)
that the rate calculator applies when a request leaves them unset.
"""

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

DEFAULT_PLATFORM_FEE_PERCENT = 5.0
DEFAULT_CURRENCY = "USDC"
# One year in minutes
DEFAULT_MAX_DURATION_MINUTES = 525600.0


@dataclass(frozen=True)
class PlatformConfig:
    """Platform-wide pricing defaults, overridable per quote."""
    platform_fee_percent: float = DEFAULT_PLATFORM_FEE_PERCENT
    currency: str = DEFAULT_CURRENCY
    max_duration_minutes: float = DEFAULT_MAX_DURATION_MINUTES

    def __post_init__(self):
        """Validate platform economics are usable."""
        if not 0 <= self.platform_fee_percent <= 100:
            raise ValueError("platform_fee_percent must be between 0 and 100")
        if not isinstance(self.currency, str) or not self.currency.strip():
            raise ValueError("currency must be a non-empty string")
        if not math.isfinite(self.max_duration_minutes) or self.max_duration_minutes <= 0:
            raise ValueError("max_duration_minutes must be > 0")

    @classmethod
    def from_env(cls, base: Optional["PlatformConfig"] = None) -> "PlatformConfig":
        """Apply PLATFORM_FEE_PERCENT and PLATFORM_CURRENCY overrides.

        Args:
            base: Configuration to start from (defaults when omitted)

        Returns:
            New PlatformConfig with any environment overrides applied

        Raises:
            ValueError: If an override is not a valid value
        """
        base = base or cls()
        fee = os.environ.get("PLATFORM_FEE_PERCENT")
        currency = os.environ.get("PLATFORM_CURRENCY")
        try:
            fee_percent = float(fee) if fee else base.platform_fee_percent
        except ValueError:
            raise ValueError(f"PLATFORM_FEE_PERCENT must be a number, got {fee!r}")
        return cls(
            platform_fee_percent=fee_percent,
            currency=currency or base.currency,
            max_duration_minutes=base.max_duration_minutes,
        )


DEFAULT_CONFIG = PlatformConfig()


def load_platform_config(path: str) -> PlatformConfig:
    """Load and validate platform configuration from a YAML file.

    Expected layout::

        platform:
          platform_fee_percent: 5.0
          currency: USDC
          max_duration_minutes: 525600

    Every key under ``platform`` is optional and falls back to the default.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated PlatformConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Platform config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    allowed_top_keys = {'platform'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    if 'platform' not in raw_config:
        raise ValueError("Missing required 'platform' section")

    platform_data = raw_config['platform']
    if not isinstance(platform_data, dict):
        raise ValueError("'platform' must be a dictionary")

    return _parse_platform_config(platform_data)


def _parse_platform_config(data: Dict[str, Any]) -> PlatformConfig:
    """Parse and validate the ``platform`` section.

    Raises:
        ValueError: If configuration is invalid
    """
    allowed_keys = {'platform_fee_percent', 'currency', 'max_duration_minutes'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in platform: {unknown_keys}")

    fee = data.get('platform_fee_percent', DEFAULT_PLATFORM_FEE_PERCENT)
    if isinstance(fee, bool) or not isinstance(fee, (int, float)):
        raise ValueError("'platform_fee_percent' in platform must be a number")

    currency = data.get('currency', DEFAULT_CURRENCY)
    if not isinstance(currency, str):
        raise ValueError("'currency' in platform must be a string")

    ceiling = data.get('max_duration_minutes', DEFAULT_MAX_DURATION_MINUTES)
    if isinstance(ceiling, bool) or not isinstance(ceiling, (int, float)):
        raise ValueError("'max_duration_minutes' in platform must be a number")

    return PlatformConfig(
        platform_fee_percent=float(fee),
        currency=currency,
        max_duration_minutes=float(ceiling)
    )
