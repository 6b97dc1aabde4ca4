"""Vendor adapters for the reporting APIs and AI fit scoring.

One adapter per external service; each builds a single request, awaits one
response and flattens it into the gateway's JSON shapes.
"""

from adapters.base import AdapterConfigError, AdapterError, VendorAdapter, calculate_change, camelize
from adapters.factory import (
    check_all_adapters,
    get_analytics_adapter,
    get_fit_scorer,
    get_pagespeed_adapter,
    get_search_console_adapter,
    reset_adapters,
)

__all__ = [
    "AdapterConfigError",
    "AdapterError",
    "VendorAdapter",
    "calculate_change",
    "camelize",
    "check_all_adapters",
    "get_analytics_adapter",
    "get_fit_scorer",
    "get_pagespeed_adapter",
    "get_search_console_adapter",
    "reset_adapters",
]
