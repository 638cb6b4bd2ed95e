"""High level link operations shared by the CLI commands."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import structlog

from fslink_manager.errors import AlreadyTrackedError, DuplicateTargetError, FslinkError, NotTrackedError
from fslink_manager.link import Link, absolute_target, canonical_source
from fslink_manager.models import LinkKind, LinkRecord
from fslink_manager.store import LinkStore

logger = structlog.get_logger()


class RemoveOutcome(str, Enum):
    """Result of a remove request."""

    REMOVED = "removed"
    NOT_PRESENT = "not_present"
    NOT_TRACKED = "not_tracked"


@dataclass
class RemoveResult:
    """Outcome of :func:`remove_link` with the record it concerned, if any."""

    outcome: RemoveOutcome
    target: Path
    record: LinkRecord | None = None


def create_link(store: LinkStore, source: str | Path, target: str | Path, link_kind: LinkKind | str) -> LinkRecord:
    """Create (or import) a link and persist it.

    A link created here is removed again if its record cannot be saved.
    Imported links are left in place.

    Raises:
        AlreadyTrackedError: If the (source, target) pair is already stored.
            Nothing on disk is touched in that case.
        DuplicateTargetError: If the target is tracked with another source
    """
    abs_source = canonical_source(source)
    abs_target = absolute_target(target)
    if store.get_by_identity(abs_source, abs_target) is not None:
        raise AlreadyTrackedError(abs_source, abs_target)
    other = store.get_by_target_path(abs_target)
    if other is not None:
        raise DuplicateTargetError(abs_target, other.source)

    link = Link.new(abs_source, abs_target, link_kind)
    imported = link.exists
    if not imported:
        link.link()
    try:
        store.put(link.record)
    except FslinkError:
        if not imported:
            _discard_untracked(link)
        raise
    logger.info("Link tracked", source=str(link.source), target=str(link.target), link_kind=str(link.link_kind))
    return link.record


def _discard_untracked(link: Link) -> None:
    try:
        link.unlink()
    except FslinkError as e:
        logger.error("Failed to remove untracked link", target=str(link.target), error=str(e))
        return
    logger.warning("Removed link whose record could not be saved", target=str(link.target))


def remove_link(store: LinkStore, target: str | Path) -> RemoveResult:
    """Remove the tracked link at ``target`` from the filesystem.

    The record stays in the store, marked absent.
    """
    abs_target = absolute_target(target)
    record = store.get_by_target_path(abs_target)
    if record is None:
        return RemoveResult(RemoveOutcome.NOT_TRACKED, abs_target)
    if not record.exists:
        return RemoveResult(RemoveOutcome.NOT_PRESENT, abs_target, record)

    link = Link.from_record(record)
    link.unlink()
    store.put(link.record)
    return RemoveResult(RemoveOutcome.REMOVED, abs_target, link.record)


def list_links(store: LinkStore) -> list[LinkRecord]:
    """Return all tracked links."""
    return store.list_all()


def toggle_link(store: LinkStore, target: str | Path) -> LinkRecord:
    """Flip the tracked link at ``target`` between present and absent.

    Raises:
        NotTrackedError: If no record has this target
    """
    abs_target = absolute_target(target)
    record = store.get_by_target_path(abs_target)
    if record is None:
        raise NotTrackedError(abs_target)

    link = Link.from_record(record)
    link.toggle()
    store.put(link.record)
    return link.record


def forget_link(store: LinkStore, target: str | Path) -> LinkRecord:
    """Stop tracking ``target`` without touching the filesystem.

    Raises:
        NotTrackedError: If no record has this target
    """
    abs_target = absolute_target(target)
    record = store.get_by_target_path(abs_target)
    if record is None:
        raise NotTrackedError(abs_target)
    store.delete(record)
    logger.info("Link forgotten", target=str(abs_target))
    return record
