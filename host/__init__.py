"""Table host: drives bot seats and bridges the engine to a presentation client."""

from .session import TableSession
from .server import HostServer

__all__ = ["TableSession", "HostServer"]
