"""Per-call execution context."""

from dataclasses import dataclass, field
from typing import Any, Protocol


class ConnectionControl(Protocol):
    """Handle exposing connection control to services."""

    def close(self, session_id: str) -> None: ...


@dataclass(frozen=True)
class Context:
    """Identity of the caller for one call.

    All calls of one HTTP request share ``id``; ``identity`` is computed per
    call from the method's middleware.
    """

    id: str
    identity: dict[str, Any] = field(default_factory=dict)
    host: ConnectionControl | None = field(default=None, repr=False, compare=False)

    def get(self, key: str, default: Any = None) -> Any:
        return self.identity.get(key, default)

    def close(self) -> None:
        """Ask the host to terminate this session."""
        if self.host is not None:
            self.host.close(self.id)
