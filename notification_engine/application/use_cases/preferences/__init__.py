"""Use cases for managing notification preferences."""

from .resolve_preferences import PreferenceResolver, get_preferences
from .update_preferences import create_default_preferences, update_preferences

__all__ = [
    "PreferenceResolver",
    "create_default_preferences",
    "get_preferences",
    "update_preferences",
]
