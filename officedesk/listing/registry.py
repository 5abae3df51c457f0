"""
Per-session list controllers.

One controller per (session id, view name). Logout disposes all of a
session's controllers; the least recently used ones are evicted once the
registry is full.
"""

from collections import OrderedDict
from typing import Callable

from officedesk.utils import Logger
from .controller import ListController

logger = Logger("listing")


class ControllerRegistry:
    def __init__(self, max_controllers: int = 2000):
        self.max_controllers = max_controllers
        self._controllers: "OrderedDict[tuple[str, str], ListController]" = OrderedDict()

    def get_or_create(
        self,
        session_id: str,
        view: str,
        factory: Callable[[], ListController],
    ) -> ListController:
        key = (session_id, view)
        controller = self._controllers.get(key)
        if controller is not None:
            self._controllers.move_to_end(key)
            return controller

        controller = factory()
        self._controllers[key] = controller
        while len(self._controllers) > self.max_controllers:
            _, evicted = self._controllers.popitem(last=False)
            evicted.close()
            logger.debug(f"Evicted list controller '{evicted.name}'")
        return controller

    def get(self, session_id: str, view: str) -> ListController | None:
        return self._controllers.get((session_id, view))

    def dispose(self, session_id: str, view: str) -> bool:
        controller = self._controllers.pop((session_id, view), None)
        if controller is None:
            return False
        controller.close()
        return True

    def dispose_session(self, session_id: str) -> int:
        keys = [k for k in self._controllers if k[0] == session_id]
        for key in keys:
            self._controllers.pop(key).close()
        if keys:
            logger.info(f"Disposed {len(keys)} list controller(s) for session {session_id[:8]}")
        return len(keys)

    def __len__(self) -> int:
        return len(self._controllers)


# ── Module-level singleton ──────────────────────────────────────
controller_registry = ControllerRegistry()


def get_controller_registry() -> ControllerRegistry:
    """FastAPI dependency — returns the shared controller registry."""
    return controller_registry
