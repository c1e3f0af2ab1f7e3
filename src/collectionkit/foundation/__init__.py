"""Foundation: configuration, errors, and shared types."""

from .config import CollectionkitSettings, clear_settings_cache, get_settings
from .errors import BarrierError, CollectionkitError, ErrorCode, UnitCancelled
from .priority import Priority

__all__ = [
    "CollectionkitSettings",
    "get_settings",
    "clear_settings_cache",
    "ErrorCode",
    "CollectionkitError",
    "BarrierError",
    "UnitCancelled",
    "Priority",
]
