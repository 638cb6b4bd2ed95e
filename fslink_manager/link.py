"""Link entity: validation and the link/unlink state machine."""

import os
from pathlib import Path

import structlog

from fslink_manager.errors import (
    InvalidTransitionError,
    IoFailureError,
    SourceMissingError,
    TargetOccupiedError,
    TargetPointsElsewhereError,
    UnsupportedLinkKindError,
)
from fslink_manager.models import LinkKind, LinkRecord

logger = structlog.get_logger()


def canonical_source(path: str | Path) -> Path:
    """Absolute source path with ``~`` expanded and symlinks resolved."""
    return Path(path).expanduser().resolve()


def absolute_target(path: str | Path) -> Path:
    """Absolute, normalized target path. Symlinks are not followed."""
    return Path(os.path.abspath(Path(path).expanduser()))


class Link:
    """A tracked filesystem link that may or may not currently exist.

    Instances are built with :meth:`new` (validation only),
    :meth:`new_autolink` (validation, then link if absent) or
    :meth:`from_record` (rehydrate a stored record without checks).
    """

    def __init__(self, record: LinkRecord) -> None:
        self.record = record

    @property
    def source(self) -> Path:
        return self.record.source

    @property
    def target(self) -> Path:
        return self.record.target

    @property
    def link_kind(self) -> LinkKind:
        return self.record.link_kind

    @property
    def exists(self) -> bool:
        return self.record.exists

    @classmethod
    def from_record(cls, record: LinkRecord) -> "Link":
        """Wrap a stored record."""
        return cls(record)

    @classmethod
    def new(cls, source: str | Path, target: str | Path, link_kind: LinkKind | str) -> "Link":
        """Validate a requested link without creating it.

        A symbolic link already at ``target`` that resolves to ``source`` is
        imported and the returned link is present. Hard links are never
        imported because they cannot be told apart from ordinary files.

        Args:
            source: Path the link points to
            target: Path where the link lives
            link_kind: Symbolic or hard

        Returns:
            Link, present if imported, absent otherwise

        Raises:
            SourceMissingError: If ``source`` does not exist
            TargetOccupiedError: If ``target`` exists and cannot be imported
            TargetPointsElsewhereError: If ``target`` is a symlink to something else
            UnsupportedLinkKindError: If a hard link would involve a directory
        """
        link_kind = LinkKind.parse(link_kind)
        abs_source = canonical_source(source)
        abs_target = absolute_target(target)
        logger.debug("Validating link", source=str(abs_source), target=str(abs_target), link_kind=str(link_kind))

        if not abs_source.exists():
            raise SourceMissingError(abs_source)

        if link_kind is LinkKind.HARD and abs_target.is_dir():
            raise UnsupportedLinkKindError(abs_source, link_kind.value, abs_target)

        exists = False
        if os.path.lexists(abs_target):
            if link_kind is LinkKind.SYMBOLIC and abs_target.is_symlink():
                try:
                    actual_source = abs_target.resolve()
                except (OSError, RuntimeError):
                    # symlink loop
                    actual_source = Path(os.readlink(abs_target))
                if actual_source != abs_source:
                    raise TargetPointsElsewhereError(abs_source, abs_target, actual_source)
                logger.info("Importing existing symbolic link", source=str(abs_source), target=str(abs_target))
                exists = True
            else:
                raise TargetOccupiedError(abs_source, abs_target)

        if link_kind is LinkKind.HARD and abs_source.is_dir():
            raise UnsupportedLinkKindError(abs_source, link_kind.value, abs_source)

        return cls(LinkRecord(source=abs_source, target=abs_target, link_kind=link_kind, exists=exists))

    @classmethod
    def new_autolink(cls, source: str | Path, target: str | Path, link_kind: LinkKind | str) -> "Link":
        """Validate like :meth:`new`, then create the link if it is absent."""
        link = cls.new(source, target, link_kind)
        if not link.exists:
            link.link()
        return link

    def link(self) -> None:
        """Create the link in the filesystem.

        Raises:
            InvalidTransitionError: If the link is already present
            IoFailureError: If the OS refuses; the link stays absent
        """
        if self.exists:
            raise InvalidTransitionError(f"Link {self.target} is already present")
        try:
            if self.link_kind is LinkKind.SYMBOLIC:
                os.symlink(self.source, self.target, target_is_directory=self.source.is_dir())
            else:
                os.link(self.source, self.target)
        except OSError as e:
            logger.error("Failed to create link", target=str(self.target), error=str(e))
            raise IoFailureError("linking", e) from e
        self.record.exists = True
        logger.info("Link created", source=str(self.source), target=str(self.target), link_kind=str(self.link_kind))

    def unlink(self) -> None:
        """Remove the link from the filesystem.

        The stored ``exists`` flag is trusted; the target is not re-checked first.

        Raises:
            InvalidTransitionError: If the link is already absent
            IoFailureError: If the OS refuses; the link stays present
        """
        if not self.exists:
            raise InvalidTransitionError(f"Link {self.target} is not present")
        try:
            # links to directories are still plain directory entries
            os.unlink(self.target)
        except OSError as e:
            logger.error("Failed to remove link", target=str(self.target), error=str(e))
            raise IoFailureError("unlinking", e) from e
        self.record.exists = False
        logger.info("Link removed", target=str(self.target))

    def toggle(self) -> None:
        """Unlink if present, link if absent."""
        if self.exists:
            self.unlink()
        else:
            self.link()

    def __str__(self) -> str:
        return self.record.describe()
