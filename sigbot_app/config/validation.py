"""Configuration validation utilities."""

from dataclasses import dataclass, fields
from typing import Any

from .defaults import (
    BreakerParams,
    BroadcastParams,
    DedupParams,
    FilterParams,
    LoggingParams,
    ManualParams,
    PacingParams,
    ScheduleParams,
    SourceParams,
    StorageParams,
)

_KNOWN_KEYS = {
    "schedule": ScheduleParams,
    "filter": FilterParams,
    "dedup": DedupParams,
    "breaker": BreakerParams,
    "broadcast": BroadcastParams,
    "pacing": PacingParams,
    "manual": ManualParams,
    "storage": StorageParams,
    "logging": LoggingParams,
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_unknown_keys(section: str, params: dict[str, Any]) -> list[ValidationError]:
        """Reject keys that the section's dataclass does not define."""
        allowed = {f.name for f in fields(_KNOWN_KEYS[section])}
        return [
            ValidationError(
                field=f"{section}.{key}",
                message="Unknown configuration key",
                value=params[key]
            )
            for key in params
            if key not in allowed
        ]

    @staticmethod
    def validate_schedule_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate timer and operating window parameters."""
        errors = []

        for name in ("interval_seconds", "start_delay_seconds"):
            if name in params:
                value = params[name]
                if not _is_number(value) or value < 0:
                    errors.append(ValidationError(
                        field=f"schedule.{name}",
                        message="Must be a non-negative number",
                        value=value
                    ))

        if "interval_seconds" in params and params["interval_seconds"] == 0:
            errors.append(ValidationError(
                field="schedule.interval_seconds",
                message="Must be greater than zero",
                value=0
            ))

        for name, upper in (("start_hour", 23), ("end_hour", 23), ("end_minute", 59)):
            if name in params:
                value = params[name]
                if not _is_int(value) or value < 0 or value > upper:
                    errors.append(ValidationError(
                        field=f"schedule.{name}",
                        message=f"Must be an integer between 0 and {upper}",
                        value=value
                    ))

        if "timezone" in params:
            value = params["timezone"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="schedule.timezone",
                    message="Must be a non-empty IANA zone name",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_filter_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate signal eligibility parameters."""
        errors = []

        if "min_confidence" in params:
            value = params["min_confidence"]
            if not _is_number(value) or value < 0 or value > 100:
                errors.append(ValidationError(
                    field="filter.min_confidence",
                    message="Must be a number between 0 and 100",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_dispatch_params(config: dict[str, Any]) -> list[ValidationError]:
        """Validate dedup, breaker, broadcast and pacing parameters."""
        errors = []

        positive_ints = (
            ("dedup", "window_seconds"),
            ("breaker", "threshold"),
            ("broadcast", "max_attempts"),
            ("manual", "scan_result_limit"),
            ("manual", "users_list_limit"),
        )
        for section, name in positive_ints:
            value = config.get(section, {}).get(name)
            if value is not None and (not _is_int(value) or value <= 0):
                errors.append(ValidationError(
                    field=f"{section}.{name}",
                    message="Must be a positive integer",
                    value=value
                ))

        non_negative = (
            ("breaker", "cooldown_seconds"),
            ("broadcast", "backoff_seconds"),
            ("broadcast", "inter_message_delay"),
            ("pacing", "between_evaluations"),
            ("pacing", "after_dispatch"),
            ("pacing", "progress_growth"),
            ("pacing", "jitter_seconds"),
            ("manual", "scan_delay_seconds"),
        )
        for section, name in non_negative:
            value = config.get(section, {}).get(name)
            if value is not None and (not _is_number(value) or value < 0):
                errors.append(ValidationError(
                    field=f"{section}.{name}",
                    message="Must be a non-negative number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_sources(sources: Any) -> list[ValidationError]:
        """Validate the ordered list of signal sources."""
        errors = []

        if not isinstance(sources, list) or not sources:
            return [ValidationError(
                field="sources",
                message="Must be a non-empty list of sources",
                value=sources
            )]

        allowed = {f.name for f in fields(SourceParams)}
        seen = set()
        for index, source in enumerate(sources):
            if not isinstance(source, dict):
                errors.append(ValidationError(
                    field=f"sources[{index}]",
                    message="Must be a mapping",
                    value=source
                ))
                continue

            for key in source:
                if key not in allowed:
                    errors.append(ValidationError(
                        field=f"sources[{index}].{key}",
                        message="Unknown configuration key",
                        value=source[key]
                    ))

            name = source.get("name")
            if not isinstance(name, str) or not name:
                errors.append(ValidationError(
                    field=f"sources[{index}].name",
                    message="Must be a non-empty string",
                    value=name
                ))
            elif name in seen:
                errors.append(ValidationError(
                    field=f"sources[{index}].name",
                    message="Duplicate source name",
                    value=name
                ))
            else:
                seen.add(name)

            url = source.get("url")
            if url is not None and (not isinstance(url, str) or not url.startswith(("http://", "https://"))):
                errors.append(ValidationError(
                    field=f"sources[{index}].url",
                    message="Must be an http(s) URL",
                    value=url
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section in _KNOWN_KEYS:
            params = config.get(section, {})
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue
            errors.extend(ConfigValidator.validate_unknown_keys(section, params))

        if errors:
            return errors

        errors.extend(ConfigValidator.validate_schedule_params(config.get("schedule", {})))
        errors.extend(ConfigValidator.validate_filter_params(config.get("filter", {})))
        errors.extend(ConfigValidator.validate_dispatch_params(config))

        if "sources" in config:
            errors.extend(ConfigValidator.validate_sources(config["sources"]))

        symbols = config.get("symbols")
        if symbols is not None and (
            not isinstance(symbols, list)
            or not symbols
            or not all(isinstance(s, str) and s for s in symbols)
        ):
            errors.append(ValidationError(
                field="symbols",
                message="Must be a non-empty list of symbols",
                value=symbols
            ))

        level = config.get("logging", {}).get("level")
        if level is not None and (not isinstance(level, str) or level.upper() not in _LOG_LEVELS):
            errors.append(ValidationError(
                field="logging.level",
                message=f"Must be one of {', '.join(_LOG_LEVELS)}",
                value=level
            ))

        return errors
