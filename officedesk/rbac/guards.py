"""
Guard expressions for section / action visibility.

A guard is a tiny AND / OR tree evaluated against a Session. Leaves test
a capability or a role.
"""

from dataclasses import dataclass

from officedesk.session import Session, Role


class Guard:
    def allows(self, session: Session) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Always(Guard):
    def allows(self, session: Session) -> bool:
        return True


@dataclass(frozen=True)
class Never(Guard):
    def allows(self, session: Session) -> bool:
        return False


@dataclass(frozen=True)
class Cap(Guard):
    name: str

    def allows(self, session: Session) -> bool:
        return session.has(self.name)


@dataclass(frozen=True)
class HasRole(Guard):
    role: Role

    def allows(self, session: Session) -> bool:
        return session.role == self.role


class AnyOf(Guard):
    def __init__(self, *guards: Guard):
        self.guards = guards

    def allows(self, session: Session) -> bool:
        return any(g.allows(session) for g in self.guards)

    def __repr__(self) -> str:
        return f"AnyOf{self.guards!r}"


class AllOf(Guard):
    def __init__(self, *guards: Guard):
        self.guards = guards

    def allows(self, session: Session) -> bool:
        return all(g.allows(session) for g in self.guards)

    def __repr__(self) -> str:
        return f"AllOf{self.guards!r}"


def any_cap(*names: str) -> Guard:
    """Shorthand: OR over capability names."""
    return AnyOf(*(Cap(n) for n in names))
