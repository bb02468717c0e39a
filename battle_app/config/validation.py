"""Configuration validation utilities."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _as_number(value: Any) -> Optional[Decimal]:
    """Numeric value as Decimal, None for bools and non-numbers."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value)
        except InvalidOperation:
            return None
    return None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates battle configuration parameters."""

    @staticmethod
    def validate_battle_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate top-level match parameters."""
        errors = []

        if "max_rounds" in params:
            value = params["max_rounds"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="max_rounds",
                    message="Must be a positive integer",
                    value=value
                ))

        if "round_duration_seconds" in params:
            value = params["round_duration_seconds"]
            if not _is_int(value) or value < 1:
                errors.append(ValidationError(
                    field="round_duration_seconds",
                    message="Must be a positive integer",
                    value=value
                ))

        if "transition_seconds" in params:
            value = params["transition_seconds"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="transition_seconds",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "starting_cash" in params:
            value = params["starting_cash"]
            number = _as_number(value)
            if number is None or number <= 0:
                errors.append(ValidationError(
                    field="starting_cash",
                    message="Must be a positive number",
                    value=value
                ))

        if "countdown_tick_seconds" in params:
            value = params["countdown_tick_seconds"]
            number = _as_number(value)
            if number is None or number <= 0:
                errors.append(ValidationError(
                    field="countdown_tick_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if params.get("seed") is not None and not _is_int(params["seed"]):
            errors.append(ValidationError(
                field="seed",
                message="Must be an integer or null",
                value=params["seed"]
            ))

        for flag in ("shared_trajectory", "auto_start_rounds"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=flag,
                    message="Must be a boolean",
                    value=params[flag]
                ))

        return errors

    @staticmethod
    def validate_market_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate price walk parameters."""
        errors = []

        if "tick_ms" in params:
            value = params["tick_ms"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="market.tick_ms",
                    message="Must be a positive integer",
                    value=value
                ))

        if "max_move_pct" in params:
            value = params["max_move_pct"]
            number = _as_number(value)
            if number is None or number < 0 or number > 100:
                errors.append(ValidationError(
                    field="market.max_move_pct",
                    message="Must be a number between 0 and 100",
                    value=value
                ))

        if "price_floor" in params:
            value = params["price_floor"]
            number = _as_number(value)
            if number is None or number <= 0:
                errors.append(ValidationError(
                    field="market.price_floor",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_ai_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate automated trader parameters."""
        errors = []

        if "policy" in params:
            value = params["policy"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="ai.policy",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "poll_interval_range_ms" in params:
            value = params["poll_interval_range_ms"]
            valid = (
                isinstance(value, (list, tuple))
                and len(value) == 2
                and all(_is_int(v) and v > 0 for v in value)
                and value[0] <= value[1]
            )
            if not valid:
                errors.append(ValidationError(
                    field="ai.poll_interval_range_ms",
                    message="Must be [min, max] positive integers with min <= max",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_catalog(
        catalog: Any,
        price_floor: Any = None
    ) -> list[ValidationError]:
        """Validate the instrument catalog."""
        errors = []

        if not isinstance(catalog, (list, tuple)) or not catalog:
            return [ValidationError(
                field="instrument_catalog",
                message="Must be a non-empty list of instruments",
                value=catalog
            )]

        floor = _as_number(price_floor) if price_floor is not None else None
        seen: set[str] = set()

        for index, entry in enumerate(catalog):
            prefix = f"instrument_catalog[{index}]"
            if not isinstance(entry, dict):
                errors.append(ValidationError(
                    field=prefix,
                    message="Must be a mapping with symbol, display_name, initial_price",
                    value=entry
                ))
                continue

            symbol = entry.get("symbol")
            if not isinstance(symbol, str) or not symbol:
                errors.append(ValidationError(
                    field=f"{prefix}.symbol",
                    message="Must be a non-empty string",
                    value=symbol
                ))
            elif symbol in seen:
                errors.append(ValidationError(
                    field=f"{prefix}.symbol",
                    message="Duplicate symbol",
                    value=symbol
                ))
            else:
                seen.add(symbol)

            price = _as_number(entry.get("initial_price"))
            if price is None or price <= 0:
                errors.append(ValidationError(
                    field=f"{prefix}.initial_price",
                    message="Must be a positive number",
                    value=entry.get("initial_price")
                ))
            elif floor is not None and price <= floor:
                errors.append(ValidationError(
                    field=f"{prefix}.initial_price",
                    message="Must be above the market price floor",
                    value=entry.get("initial_price")
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = ConfigValidator.validate_battle_params(config)

        market = config.get("market") or {}
        if not isinstance(market, dict):
            errors.append(ValidationError(
                field="market",
                message="Must be a mapping",
                value=market
            ))
            market = {}
        errors.extend(ConfigValidator.validate_market_params(market))

        ai = config.get("ai") or {}
        if not isinstance(ai, dict):
            errors.append(ValidationError(
                field="ai",
                message="Must be a mapping",
                value=ai
            ))
            ai = {}
        errors.extend(ConfigValidator.validate_ai_params(ai))

        if "instrument_catalog" in config:
            errors.extend(ConfigValidator.validate_catalog(
                config["instrument_catalog"],
                market.get("price_floor")
            ))

        return errors
