"""
Access resolver — role + permission map -> visible sections and actions.

Pure and side-effect free; callers recompute it per request.
"""

from dataclasses import dataclass
from typing import Optional

from officedesk.session import Session
from officedesk.utils import Logger
from .capabilities import ACTION_GUARDS, SECTION_GUARDS, ActionId, NavSection

logger = Logger("rbac")


@dataclass(frozen=True)
class Visibility:
    sections: frozenset[NavSection]
    actions: frozenset[ActionId]

    def can_see(self, section: NavSection | str) -> bool:
        return NavSection(section) in self.sections

    def can(self, action: ActionId | str) -> bool:
        return ActionId(action) in self.actions

    def to_dict(self) -> dict:
        # Sorted so the payload is stable across requests
        return {
            "sections": sorted(s.value for s in self.sections),
            "actions": sorted(a.value for a in self.actions),
        }


EVERYTHING = Visibility(
    sections=frozenset(NavSection),
    actions=frozenset(ActionId),
)
NOTHING = Visibility(sections=frozenset(), actions=frozenset())


def resolve_visibility(session: Optional[Session]) -> Visibility:
    """
    Compute what the session may see.

    - No session          -> nothing
    - role == "admin"     -> everything, whatever the permission map says
    - anything else       -> each guard in the table evaluated on its own;
                             dashboard is always visible
    """
    if session is None:
        return NOTHING
    if session.is_admin:
        return EVERYTHING

    sections = set()
    for section, guard in SECTION_GUARDS.items():
        try:
            if guard.allows(session):
                sections.add(section)
        except Exception as exc:
            logger.warning(f"Guard for section {section.value} failed: {exc!r}")

    actions = set()
    for action, guard in ACTION_GUARDS.items():
        try:
            if guard.allows(session):
                actions.add(action)
        except Exception as exc:
            logger.warning(f"Guard for action {action.value} failed: {exc!r}")

    return Visibility(sections=frozenset(sections), actions=frozenset(actions))
