from .capabilities import (
    ACTION_GUARDS,
    ALL_CAPABILITIES,
    SECTION_GUARDS,
    ActionId,
    NavSection,
)
from .resolver import EVERYTHING, NOTHING, Visibility, resolve_visibility
from .decorators import require_action, require_section

__all__ = [
    "ACTION_GUARDS",
    "ALL_CAPABILITIES",
    "SECTION_GUARDS",
    "ActionId",
    "NavSection",
    "EVERYTHING",
    "NOTHING",
    "Visibility",
    "resolve_visibility",
    "require_action",
    "require_section",
]
