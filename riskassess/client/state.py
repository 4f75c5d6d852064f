"""
Client-side application state with change notification.

A plain observer: ``update()`` assigns fields and tells every subscriber
which ones actually changed. Views re-render from it and the controller
reacts to ``user`` changes.
"""

from typing import Callable, List, Set

LOGIN = "login"
HOME_PAGE = "homePage"

FIELDS = ("user", "current_page", "project_idea", "ai_response", "loading", "projects")

# Compared by identity: every sign-in hands over a fresh user object.
IDENTITY_FIELDS = ("user",)

Listener = Callable[["AppState", Set[str]], None]


class AppState:
    def __init__(self):
        self.user = None
        self.current_page = LOGIN
        self.project_idea = ""
        self.ai_response = None
        self.loading = False
        self.projects: List[dict] = []
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes) -> Set[str]:
        unknown = set(changes) - set(FIELDS)
        if unknown:
            raise AttributeError(f"Unknown state field(s): {', '.join(sorted(unknown))}")

        changed = set()
        for name, value in changes.items():
            current = getattr(self, name)
            if name in IDENTITY_FIELDS:
                differs = current is not value
            else:
                differs = current != value
            if differs:
                setattr(self, name, value)
                changed.add(name)

        if changed:
            for listener in list(self._listeners):
                listener(self, changed)
        return changed
