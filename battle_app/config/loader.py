"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass, fields, is_dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import (
    AIParams,
    BattleConfig,
    InstrumentSpec,
    MarketParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILENAME = "battle.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: BattleConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from battle.yaml in the config directory."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{config_file} must contain a mapping",
                context={"path": str(config_file)}
            )
        return file_config.get("battle", file_config)  # type: ignore[no-any-return]

    def merge_config(
        self,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. battle.yaml in the config directory
        3. Built-in defaults (lowest priority)
        """
        config = config_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def load_battle_config(
        self,
        overrides: Optional[dict[str, Any]] = None
    ) -> BattleConfig:
        """Merge, validate and build a BattleConfig."""
        return build_battle_config(self.merge_config(overrides))

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def config_to_dict(obj: Any) -> Any:
    """Convert nested config dataclasses to plain dicts and lists."""
    if is_dataclass(obj):
        return {
            f.name: config_to_dict(getattr(obj, f.name))
            for f in fields(obj)
        }
    if isinstance(obj, tuple):
        return [config_to_dict(item) for item in obj]
    return obj


def validate_battle_config(config: BattleConfig) -> None:
    """
    Validate an already-built BattleConfig.

    Raises:
        ConfigurationError: listing every validation error found
    """
    _raise_on_errors(ConfigValidator.validate_config(config_to_dict(config)))


def _raise_on_errors(errors: list) -> None:
    if errors:
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors)
        raise ConfigurationError(
            f"Invalid battle configuration: {summary}",
            errors=errors
        )


def build_battle_config(config: dict[str, Any]) -> BattleConfig:
    """
    Validate a merged configuration dict and build a BattleConfig.

    Keys missing from the dict fall back to the dataclass defaults.

    Raises:
        ConfigurationError: listing every validation error found
    """
    _raise_on_errors(ConfigValidator.validate_config(config))

    market = config.get("market") or {}
    ai = config.get("ai") or {}

    kwargs: dict[str, Any] = {
        key: config[key]
        for key in (
            "max_rounds",
            "round_duration_seconds",
            "transition_seconds",
            "countdown_tick_seconds",
            "seed",
            "shared_trajectory",
            "auto_start_rounds",
        )
        if key in config
    }

    if "starting_cash" in config:
        kwargs["starting_cash"] = Decimal(str(config["starting_cash"]))

    market_kwargs: dict[str, Any] = {}
    if "tick_ms" in market:
        market_kwargs["tick_ms"] = market["tick_ms"]
    if "max_move_pct" in market:
        market_kwargs["max_move_pct"] = float(market["max_move_pct"])
    if "price_floor" in market:
        market_kwargs["price_floor"] = Decimal(str(market["price_floor"]))
    kwargs["market"] = MarketParams(**market_kwargs)

    ai_kwargs: dict[str, Any] = {}
    if "policy" in ai:
        ai_kwargs["policy"] = ai["policy"]
    if "poll_interval_range_ms" in ai:
        low, high = ai["poll_interval_range_ms"]
        ai_kwargs["poll_interval_range_ms"] = (low, high)
    kwargs["ai"] = AIParams(**ai_kwargs)

    if "instrument_catalog" in config:
        kwargs["instrument_catalog"] = tuple(
            InstrumentSpec(
                symbol=entry["symbol"],
                display_name=entry.get("display_name") or entry["symbol"],
                initial_price=Decimal(str(entry["initial_price"])),
            )
            for entry in config["instrument_catalog"]
        )

    return BattleConfig(**kwargs)
