"""HTTP server for servicebox hosts."""

from servicebox.server.app import create_app
from servicebox.server.runner import ServerRunner

__all__ = ["ServerRunner", "create_app"]
