"""Exceptions raised by fslink-manager."""

from pathlib import Path


class FslinkError(Exception):
    """Base exception for link tracking operations."""

    pass


class SourceMissingError(FslinkError):
    """Raised when the requested link source does not exist."""

    def __init__(self, source: Path) -> None:
        super().__init__(f"Link for {source} cannot be created - source does not exist")
        self.source = source


class TargetOccupiedError(FslinkError):
    """Raised when the target path exists and cannot be imported as a link."""

    def __init__(self, source: Path, target: Path) -> None:
        super().__init__(f"Link for {source} cannot be created - target ({target}) exists")
        self.source = source
        self.target = target


class TargetPointsElsewhereError(FslinkError):
    """Raised when the target is a symbolic link to a different source."""

    def __init__(self, source: Path, target: Path, actual_source: Path) -> None:
        super().__init__(
            f"Link for {source} cannot be created - target ({target}) is already a link from {actual_source}"
        )
        self.source = source
        self.target = target
        self.actual_source = actual_source


class UnsupportedLinkKindError(FslinkError):
    """Raised when a link kind cannot be applied to the paths involved."""

    def __init__(self, source: Path, link_kind: str, path: Path) -> None:
        super().__init__(
            f"Link for {source} cannot be created - {link_kind} link is incompatible with directory {path}"
        )
        self.source = source
        self.link_kind = link_kind
        self.path = path


class IoFailureError(FslinkError):
    """Raised when an underlying filesystem operation fails.

    The original ``OSError`` is kept on ``error`` and chained as ``__cause__``.
    """

    def __init__(self, action: str, error: OSError) -> None:
        super().__init__(f"Encountered an io error while {action}: {error}")
        self.action = action
        self.error = error


class StoreRootNotFoundError(FslinkError):
    """Raised when no store marker directory exists in any ancestor."""

    def __init__(self, start_dir: Path, marker: str) -> None:
        super().__init__(
            f"No {marker} directory found in {start_dir} or any of its parents. Run 'fslink init' to create one."
        )
        self.start_dir = start_dir
        self.marker = marker


class CorruptRecordError(FslinkError):
    """Raised when a stored record file cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Corrupt link record {path}: {reason}")
        self.path = path
        self.reason = reason


class AlreadyTrackedError(FslinkError):
    """Raised when creating a link whose (source, target) pair is already stored."""

    def __init__(self, source: Path, target: Path) -> None:
        super().__init__(f"A link for source '{source}' and target '{target}' is already tracked")
        self.source = source
        self.target = target


class NotTrackedError(FslinkError):
    """Raised when no stored record matches a target path."""

    def __init__(self, target: Path) -> None:
        super().__init__(f"No tracked link found for target: {target}")
        self.target = target


class DuplicateTargetError(FslinkError):
    """Raised when saving a record would give one target two records."""

    def __init__(self, target: Path, existing_source: Path) -> None:
        super().__init__(f"Target {target} is already tracked as a link from {existing_source}")
        self.target = target
        self.existing_source = existing_source


class InvalidTransitionError(FslinkError):
    """Raised when linking a present link or unlinking an absent one."""

    pass


class ConfigError(FslinkError):
    """Raised when the configuration file cannot be read or written."""

    pass
