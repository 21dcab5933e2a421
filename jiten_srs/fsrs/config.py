"""
Scheduler Configuration

Loads scheduler settings from environment variables (a local .env file is
picked up via python-dotenv). Every setting has a default, so an empty
environment yields the standard FSRS scheduler.

Environment variables:
    FSRS_DESIRED_RETENTION   target recall probability, e.g. 0.9
    FSRS_LEARNING_STEPS      comma-separated durations, e.g. "1m,10m"
    FSRS_RELEARNING_STEPS    comma-separated durations, e.g. "10m" ("" = none)
    FSRS_MAXIMUM_INTERVAL    maximum interval in days
    FSRS_ENABLE_FUZZING      "true" / "false"
    FSRS_PARAMETERS          21 comma-separated floats
"""

from __future__ import annotations
import os
import re
from datetime import timedelta
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from jiten_srs.fsrs.constants import (
    DEFAULT_DESIRED_RETENTION,
    DEFAULT_ENABLE_FUZZING,
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_PARAMETERS,
    DEFAULT_RELEARNING_STEPS,
    PARAMETER_COUNT,
)

load_dotenv()


_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([smhd])\s*$")
_DURATION_UNITS = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value: str) -> timedelta:
    """
    Parse a short duration string such as "90s", "10m", "1h" or "2d".

    Raises:
        ValueError: the string is not a number followed by s/m/h/d
    """
    match = _DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid duration {value!r}, expected e.g. '10m'")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit]: float(amount)})


def parse_steps(value: str) -> List[timedelta]:
    """Parse a comma-separated list of durations; blank means no steps."""
    return [parse_duration(part) for part in value.split(",") if part.strip()]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class SchedulerConfig(BaseModel):
    """Validated scheduler settings."""

    parameters: List[float] = Field(default_factory=lambda: list(DEFAULT_PARAMETERS))
    desired_retention: float = Field(default=DEFAULT_DESIRED_RETENTION, gt=0, lt=1)
    learning_steps: List[timedelta] = Field(default_factory=lambda: list(DEFAULT_LEARNING_STEPS))
    relearning_steps: List[timedelta] = Field(default_factory=lambda: list(DEFAULT_RELEARNING_STEPS))
    maximum_interval: int = Field(default=DEFAULT_MAXIMUM_INTERVAL, ge=1)
    enable_fuzzing: bool = DEFAULT_ENABLE_FUZZING

    @field_validator("parameters")
    @classmethod
    def check_parameter_count(cls, value: List[float]) -> List[float]:
        if len(value) != PARAMETER_COUNT:
            raise ValueError(f"Expected {PARAMETER_COUNT} parameters, got {len(value)}")
        return value

    @field_validator("learning_steps", "relearning_steps")
    @classmethod
    def check_steps_positive(cls, value: List[timedelta]) -> List[timedelta]:
        if any(step <= timedelta(0) for step in value):
            raise ValueError("Steps must be positive durations")
        return value

    @classmethod
    def from_env(cls) -> SchedulerConfig:
        """Build configuration from FSRS_* environment variables."""
        values: dict = {}

        retention = os.getenv("FSRS_DESIRED_RETENTION")
        if retention:
            values["desired_retention"] = float(retention)

        learning = os.getenv("FSRS_LEARNING_STEPS")
        if learning is not None:
            values["learning_steps"] = parse_steps(learning)

        relearning = os.getenv("FSRS_RELEARNING_STEPS")
        if relearning is not None:
            values["relearning_steps"] = parse_steps(relearning)

        maximum = os.getenv("FSRS_MAXIMUM_INTERVAL")
        if maximum:
            values["maximum_interval"] = int(maximum)

        values["enable_fuzzing"] = _env_bool("FSRS_ENABLE_FUZZING", DEFAULT_ENABLE_FUZZING)

        parameters = _parse_parameters(os.getenv("FSRS_PARAMETERS"))
        if parameters is not None:
            values["parameters"] = parameters

        return cls(**values)


def _parse_parameters(raw: Optional[str]) -> Optional[List[float]]:
    if not raw:
        return None
    return [float(part) for part in raw.split(",") if part.strip()]
