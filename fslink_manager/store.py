"""Directory-backed storage for link records.

Each record lives in its own JSON file under ``<root>/.fslink/links/``, named
by the key derived from its (source, target) pair. The store does no locking:
two processes writing the same record race and the last write wins.
"""

import json
import os
import stat
from collections.abc import Iterator
from pathlib import Path

import structlog

from fslink_manager.errors import CorruptRecordError, DuplicateTargetError, IoFailureError, StoreRootNotFoundError
from fslink_manager.hashing import derive_key
from fslink_manager.models import LinkRecord

logger = structlog.get_logger()

MARKER_DIR_ENV = "FSLINK_DIR"
DEFAULT_MARKER_DIR = ".fslink"
RECORDS_DIR = "links"
TMP_SUFFIX = ".tmp"


def marker_dir_name() -> str:
    """Name of the store marker directory."""
    return os.environ.get(MARKER_DIR_ENV) or DEFAULT_MARKER_DIR


class LinkStore:
    """Keyed record store rooted at a marker directory."""

    def __init__(self, marker_dir: Path) -> None:
        """Bind to an existing marker directory.

        The records subdirectory is created if it is missing.

        Args:
            marker_dir: Path of the marker directory (e.g. /home/me/.fslink)
        """
        self.marker_dir = Path(marker_dir)
        self.records_dir = self.marker_dir / RECORDS_DIR
        try:
            self.records_dir.mkdir(exist_ok=True)
        except OSError as e:
            logger.error("Failed to create records directory", records_dir=str(self.records_dir), error=str(e))
            raise IoFailureError("creating the records directory", e) from e
        logger.debug("Link store opened", marker_dir=str(self.marker_dir))

    @classmethod
    def locate(cls, start_dir: str | Path) -> "LinkStore":
        """Find the store by walking up from ``start_dir``.

        Args:
            start_dir: Directory to start the search in

        Returns:
            Store bound to the nearest marker directory

        Raises:
            StoreRootNotFoundError: If no ancestor holds a marker directory
            IoFailureError: If a candidate marker cannot be inspected
        """
        marker = marker_dir_name()
        try:
            start = Path(start_dir).resolve(strict=True)
        except OSError as e:
            raise IoFailureError("resolving the start directory", e) from e

        for directory in (start, *start.parents):
            candidate = directory / marker
            try:
                is_marker = stat.S_ISDIR(os.stat(candidate).st_mode)
            except (FileNotFoundError, NotADirectoryError):
                continue
            except OSError as e:
                logger.error("Failed to inspect store marker", candidate=str(candidate), error=str(e))
                raise IoFailureError("locating the store", e) from e
            if is_marker:
                logger.debug("Found store marker", marker_dir=str(candidate))
                return cls(candidate)

        logger.debug("Store marker not found", start_dir=str(start), marker=marker)
        raise StoreRootNotFoundError(start, marker)

    @classmethod
    def init(cls, start_dir: str | Path) -> "LinkStore":
        """Create the marker directory in ``start_dir`` (if absent) and bind to it."""
        marker_dir = Path(start_dir).resolve() / marker_dir_name()
        try:
            marker_dir.mkdir(exist_ok=True)
        except OSError as e:
            logger.error("Failed to create store marker", marker_dir=str(marker_dir), error=str(e))
            raise IoFailureError("creating the store directory", e) from e
        logger.info("Store initialized", marker_dir=str(marker_dir))
        return cls(marker_dir)

    def _record_path(self, key: str) -> Path:
        return self.records_dir / key

    def keys(self) -> list[str]:
        """Return the keys of all stored records, sorted."""
        try:
            names = [
                entry.name
                for entry in self.records_dir.iterdir()
                if entry.is_file() and not entry.name.endswith(TMP_SUFFIX)
            ]
        except OSError as e:
            raise IoFailureError("listing link records", e) from e
        return sorted(names)

    def get(self, key: str) -> LinkRecord | None:
        """Read the record stored under ``key``.

        Returns:
            The record, or None if no file exists for the key

        Raises:
            CorruptRecordError: If the file exists but cannot be parsed
            IoFailureError: If the file cannot be read
        """
        path = self._record_path(key)
        try:
            with open(path, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            logger.debug("Record not found", key=key)
            return None
        except OSError as e:
            logger.error("Failed to read record", key=key, error=str(e))
            raise IoFailureError(f"reading link record {key}", e) from e

        try:
            record = LinkRecord.from_dict(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, ValueError) as e:
            raise CorruptRecordError(path, str(e)) from e

        logger.debug("Record loaded", key=key, target=str(record.target))
        return record

    def get_by_identity(self, source: str | Path, target: str | Path) -> LinkRecord | None:
        """Read the record for a (source, target) pair."""
        return self.get(derive_key(source, target))

    def get_by_target_path(self, target: str | Path) -> LinkRecord | None:
        """Find the record whose target is ``target``.

        Records are keyed by (source, target), so this scans every record.
        Scan order is sorted by key; corrupt records are skipped.
        """
        target = Path(target)
        for record in self._iter_records():
            if record.target == target:
                return record
        logger.debug("No record for target", target=str(target))
        return None

    def put(self, record: LinkRecord) -> str:
        """Write ``record`` under its derived key, replacing any previous version.

        The duplicate target check is a full scan of the stored records.

        Returns:
            The storage key

        Raises:
            DuplicateTargetError: If another record already tracks the same target
            IoFailureError: If the file cannot be written
        """
        key = derive_key(record.source, record.target)

        existing = self.get_by_target_path(record.target)
        if existing is not None and derive_key(existing.source, existing.target) != key:
            raise DuplicateTargetError(record.target, existing.source)

        path = self._record_path(key)
        tmp_path = path.with_name(path.name + TMP_SUFFIX)
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(record.to_dict(), f, indent=2)
            tmp_path.replace(path)
        except OSError as e:
            logger.error("Failed to save record", key=key, error=str(e))
            raise IoFailureError(f"writing link record {key}", e) from e

        logger.debug("Record saved", key=key, target=str(record.target), exists=record.exists)
        return key

    def delete(self, record: LinkRecord) -> bool:
        """Remove the stored record for ``record``'s (source, target) pair.

        Returns:
            True if a file was removed, False if none existed
        """
        key = derive_key(record.source, record.target)
        try:
            self._record_path(key).unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise IoFailureError(f"deleting link record {key}", e) from e
        logger.debug("Record deleted", key=key)
        return True

    def list_all(self) -> list[LinkRecord]:
        """Return every readable record, sorted by key."""
        return list(self._iter_records())

    def _iter_records(self) -> Iterator[LinkRecord]:
        for key in self.keys():
            try:
                record = self.get(key)
            except CorruptRecordError as e:
                logger.warning("Skipping corrupt record", key=key, error=str(e))
                continue
            if record is not None:
                yield record
