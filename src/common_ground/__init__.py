"""common_ground package initialization."""

from ._build_info import APP_VERSION
from .core.slot_finder import find_available_slots

__all__ = ["find_available_slots"]

__version__ = APP_VERSION
