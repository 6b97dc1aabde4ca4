"""Abstract base class and shared helpers for vendor adapters."""

import math
import re
from abc import ABC, abstractmethod
from dataclasses import asdict, is_dataclass
from typing import Any


class AdapterError(Exception):
    """A vendor call failed."""


class AdapterConfigError(AdapterError):
    """A credential or id the vendor call needs is not configured."""


class VendorAdapter(ABC):
    """Abstract base class for vendor adapters.

    Implementations: GoogleAnalyticsAdapter, SearchConsoleAdapter,
    PageSpeedAdapter, GeminiFitScorer
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name for logging."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check whether the adapter has the configuration it needs.

        Returns:
            True if a call could be attempted, False otherwise.
        """
        ...


def calculate_change(current: float, previous: float) -> float:
    """Percentage change from previous to current.

    A zero previous value gives 100 when current is positive and 0 otherwise.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return (current - previous) / previous * 100


def to_int(value: Any) -> int:
    """Parse a vendor numeric string, truncating decimals. Invalid input is 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def to_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


_CAMEL_RE = re.compile(r"_([a-z0-9])")


def camel(name: str) -> str:
    return _CAMEL_RE.sub(lambda m: m.group(1).upper(), name)


def camelize(value: Any) -> Any:
    """Recursively convert dataclasses and dict keys to camelCase JSON shapes."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {camel(k) if isinstance(k, str) else k: camelize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [camelize(v) for v in value]
    return value
