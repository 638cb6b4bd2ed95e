"""Track filesystem links so they can be listed, removed and toggled later."""

from fslink_manager.link import Link
from fslink_manager.models import LinkKind, LinkRecord
from fslink_manager.store import LinkStore

__all__ = ["Link", "LinkKind", "LinkRecord", "LinkStore"]
