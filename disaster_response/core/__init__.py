"""
India Disaster Response - Core Utilities
Central configuration, logging, reference data, and phone handling.
"""

from disaster_response.core.config import settings
from disaster_response.core.constants import (
    DISASTER_TYPES,
    SEVERITY_LEVELS,
    INDIAN_STATES,
    SEVERITY_COLORS,
)
from disaster_response.core.phone import (
    PhoneNumberNormalizer,
    is_valid,
    normalize,
)

__all__ = [
    "settings",
    "DISASTER_TYPES",
    "SEVERITY_LEVELS",
    "INDIAN_STATES",
    "SEVERITY_COLORS",
    "PhoneNumberNormalizer",
    "is_valid",
    "normalize",
]
