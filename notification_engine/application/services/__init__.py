"""Policies shared by the notification use cases."""

from .channel_dispatcher import (
    ChannelDispatcher,
    EmailTransport,
    ProfileEmailLookup,
    get_email_executor,
)
from .preference_cache import PreferenceCache
from .priority_classifier import (
    PriorityClassifier,
    ProviderPriorityClassifier,
    RuleBasedPriorityClassifier,
    build_priority_classifier,
)
from .quiet_hours import is_quiet, next_window_end

__all__ = [
    "ChannelDispatcher",
    "EmailTransport",
    "PreferenceCache",
    "PriorityClassifier",
    "ProfileEmailLookup",
    "ProviderPriorityClassifier",
    "RuleBasedPriorityClassifier",
    "build_priority_classifier",
    "get_email_executor",
    "is_quiet",
    "next_window_end",
]
