from __future__ import annotations


class PortalError(Exception):
    """Base class for portal errors."""


class SourceUnavailable(PortalError):
    def __init__(self, tab: str, reason: str) -> None:
        self.tab = tab
        self.reason = reason
        super().__init__(f"tab {tab!r} unavailable: {reason}")


class AIUnavailable(PortalError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)
