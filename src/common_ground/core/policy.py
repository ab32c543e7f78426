"""Scheduling policy model and its on-disk store."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path
from typing import Any, Callable

import portalocker

from .exceptions import PolicyError
from .paths import ensure_app_structure, policy_path
from .time_blocks import time_to_minutes

DEFAULT_WINDOW_START = "09:00"
DEFAULT_WINDOW_END = "18:00"
DEFAULT_WEEKDAY_MASK = (False, True, True, True, True, True, False)
DEFAULT_MIN_DURATION = 60
DEFAULT_MAX_DURATION = 120
DEFAULT_NUM_SLOTS = 3
DEFAULT_SPREAD_DAYS = 2
DEFAULT_NUM_DAYS = 14

LOGGER = logging.getLogger("common_ground.policy")


@dataclass(frozen=True, slots=True)
class Exclusion:
    """Recurring daily period (``HH:MM`` to ``HH:MM``) never offered for meetings."""

    start: str
    end: str

    @property
    def start_minutes(self) -> int:
        return time_to_minutes(self.start)

    @property
    def end_minutes(self) -> int:
        return time_to_minutes(self.end)

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start, "end": self.end}


def _default_exclusions() -> tuple[Exclusion, ...]:
    return (Exclusion(start="12:00", end="13:00"),)


@dataclass(frozen=True, slots=True)
class Policy:
    search_start_date: date
    num_days_to_search: int = DEFAULT_NUM_DAYS
    daily_window_start: str = DEFAULT_WINDOW_START
    daily_window_end: str = DEFAULT_WINDOW_END
    exclusions: tuple[Exclusion, ...] = field(default_factory=_default_exclusions)
    weekday_mask: tuple[bool, ...] = DEFAULT_WEEKDAY_MASK
    min_duration_minutes: int = DEFAULT_MIN_DURATION
    max_duration_minutes: int = DEFAULT_MAX_DURATION
    num_slots_required: int = DEFAULT_NUM_SLOTS
    spread_days_target: int = DEFAULT_SPREAD_DAYS

    @property
    def window_start_minutes(self) -> int:
        return time_to_minutes(self.daily_window_start)

    @property
    def window_end_minutes(self) -> int:
        return time_to_minutes(self.daily_window_end)

    def allows_weekday(self, day: date) -> bool:
        # date.weekday() is Monday=0; the mask is Sunday=0.
        return bool(self.weekday_mask[(day.weekday() + 1) % 7])

    def with_start_date(self, start: date) -> "Policy":
        return replace(self, search_start_date=start)

    def to_dict(self) -> dict[str, Any]:
        return {
            "search_start_date": self.search_start_date.isoformat(),
            "num_days_to_search": self.num_days_to_search,
            "daily_window_start": self.daily_window_start,
            "daily_window_end": self.daily_window_end,
            "exclusions": [exclusion.to_dict() for exclusion in self.exclusions],
            "weekday_mask": list(self.weekday_mask),
            "min_duration_minutes": self.min_duration_minutes,
            "max_duration_minutes": self.max_duration_minutes,
            "num_slots_required": self.num_slots_required,
            "spread_days_target": self.spread_days_target,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any], *, today: date | None = None) -> "Policy":
        if not isinstance(payload, dict):
            raise PolicyError("Policy payload must be a JSON object")

        raw_start = payload.get("search_start_date")
        if raw_start:
            try:
                search_start = date.fromisoformat(str(raw_start))
            except ValueError as exc:
                raise PolicyError(f"Invalid search start date: {raw_start!r}") from exc
        else:
            search_start = today or date.today()

        raw_exclusions = payload.get("exclusions")
        if raw_exclusions is None:
            exclusions = _default_exclusions()
        elif isinstance(raw_exclusions, list):
            exclusions = tuple(_parse_exclusion(item) for item in raw_exclusions)
        else:
            raise PolicyError("Exclusions must be a list of {start, end} objects")

        raw_mask = payload.get("weekday_mask", list(DEFAULT_WEEKDAY_MASK))
        if not isinstance(raw_mask, (list, tuple)) or not all(isinstance(flag, bool) for flag in raw_mask):
            raise PolicyError("Weekday mask must be a list of 7 booleans")

        try:
            policy = cls(
                search_start_date=search_start,
                num_days_to_search=int(payload.get("num_days_to_search", DEFAULT_NUM_DAYS)),
                daily_window_start=str(payload.get("daily_window_start") or DEFAULT_WINDOW_START).strip(),
                daily_window_end=str(payload.get("daily_window_end") or DEFAULT_WINDOW_END).strip(),
                exclusions=exclusions,
                weekday_mask=tuple(raw_mask),
                min_duration_minutes=int(payload.get("min_duration_minutes", DEFAULT_MIN_DURATION)),
                max_duration_minutes=int(payload.get("max_duration_minutes", DEFAULT_MAX_DURATION)),
                num_slots_required=int(payload.get("num_slots_required", DEFAULT_NUM_SLOTS)),
                spread_days_target=int(payload.get("spread_days_target", DEFAULT_SPREAD_DAYS)),
            )
        except (TypeError, ValueError) as exc:
            raise PolicyError("Policy payload is invalid") from exc

        validate_policy(policy)
        return policy


def _parse_exclusion(item: Any) -> Exclusion:
    if not isinstance(item, dict) or "start" not in item or "end" not in item:
        raise PolicyError(f"Exclusion must be an object with start and end: {item!r}")
    return Exclusion(start=str(item["start"]).strip(), end=str(item["end"]).strip())


def _check_time(label: str, value: str) -> int:
    try:
        return time_to_minutes(value)
    except ValueError as exc:
        raise PolicyError(f"{label} is not a valid HH:MM time: {value!r}") from exc


def validate_policy(policy: Policy) -> None:
    """Reject structurally invalid policies; warn about unreachable spread targets."""
    window_start = _check_time("Daily window start", policy.daily_window_start)
    window_end = _check_time("Daily window end", policy.daily_window_end)
    if window_end <= window_start:
        raise PolicyError("Daily window end must be after its start")
    for exclusion in policy.exclusions:
        _check_time("Exclusion start", exclusion.start)
        _check_time("Exclusion end", exclusion.end)
    if len(policy.weekday_mask) != 7:
        raise PolicyError("Weekday mask must have exactly 7 entries (Sunday first)")
    if policy.num_days_to_search < 1:
        raise PolicyError("Number of days to search must be at least 1")
    if policy.min_duration_minutes < 1:
        raise PolicyError("Minimum duration must be at least 1 minute")
    if policy.max_duration_minutes < policy.min_duration_minutes:
        raise PolicyError("Maximum duration must not be shorter than the minimum duration")
    if policy.num_slots_required < 1:
        raise PolicyError("Number of slots must be at least 1")
    if policy.spread_days_target < 1:
        raise PolicyError("Spread days target must be at least 1")
    if policy.num_slots_required < policy.spread_days_target:
        LOGGER.warning(
            "Spread target exceeds slot count; slots will fill chronologically",
            extra={
                "event": "policy_spread_unreachable",
                "num_slots_required": policy.num_slots_required,
                "spread_days_target": policy.spread_days_target,
            },
        )


class PolicyStore:
    def __init__(
        self,
        path: Path | None = None,
        *,
        lock_timeout: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        if path is None:
            ensure_app_structure()
        self._path = Path(path) if path is not None else policy_path()
        self._lock_timeout = lock_timeout
        self._logger = logger or LOGGER

    @property
    def path(self) -> Path:
        return self._path

    def load(self, *, today: date | None = None) -> Policy:
        if not self._path.exists():
            self._logger.info(
                "Policy file missing; using defaults",
                extra={"event": "policy_load_default", "path": str(self._path)},
            )
            return Policy(search_start_date=today or date.today())

        try:
            with portalocker.Lock(
                self._path,
                mode="r",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.SHARED | portalocker.LockFlags.NON_BLOCKING,
                encoding="utf-8",
            ) as infile:
                payload = json.load(infile)
        except json.JSONDecodeError as exc:
            self._logger.exception(
                "Invalid JSON in policy file",
                extra={"event": "policy_load_invalid_json", "path": str(self._path)},
            )
            raise PolicyError("Policy file is malformed") from exc
        except Exception as exc:
            self._logger.exception("Unexpected error loading policy")
            raise PolicyError("Unable to load policy") from exc

        policy = Policy.from_dict(payload, today=today)
        self._logger.info(
            "Policy loaded successfully",
            extra={"event": "policy_loaded", "path": str(self._path), **policy.to_dict()},
        )
        return policy

    def save(self, policy: Policy) -> None:
        validate_policy(policy)
        self._logger.info(
            "Saving policy",
            extra={"event": "policy_save", "path": str(self._path), **policy.to_dict()},
        )
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_suffix(".tmp")
        try:
            with portalocker.Lock(
                temp_path,
                mode="w",
                timeout=self._lock_timeout,
                flags=portalocker.LockFlags.EXCLUSIVE | portalocker.LockFlags.NON_BLOCKING,
                encoding="utf-8",
            ) as outfile:
                json.dump(policy.to_dict(), outfile, indent=2)
                outfile.flush()
                os.fsync(outfile.fileno())
            temp_path.replace(self._path)
        except Exception as exc:
            self._logger.exception("Failed to save policy")
            raise PolicyError("Unable to save policy") from exc

    def update(self, transform: Callable[[Policy], Policy]) -> Policy:
        current = self.load()
        updated = transform(current)
        self.save(updated)
        return updated
