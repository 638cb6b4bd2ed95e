"""CLI for fslink-manager."""

import sys
from pathlib import Path
from typing import Annotated, Literal

import structlog
from cyclopts import App, Parameter

from fslink_manager import manager
from fslink_manager.config import get_config
from fslink_manager.config_commands import config_app
from fslink_manager.errors import FslinkError
from fslink_manager.manager import RemoveOutcome
from fslink_manager.models import LinkKind
from fslink_manager.store import LinkStore

logger = structlog.get_logger()

DEFAULT_LINK_KIND_KEY = "default_link_kind"

app = App(
    name="fslink",
    help="fslink - manage filesystem links and track them locally",
)

app.command(config_app)


def configure_logging(log_level: str) -> None:
    """Configure structlog with the specified log level."""
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(min_level=log_level.lower()))


def report_error(error: Exception | str) -> None:
    """Print an error for the user."""
    print(f"Error: {error}", file=sys.stderr)


def get_store() -> LinkStore:
    """Get the store for the current working directory."""
    return LinkStore.locate(Path.cwd())


def resolve_link_kind(link_kind: str | None) -> LinkKind:
    """Use the given kind, else the configured default, else symbolic."""
    if link_kind is None:
        link_kind = get_config().get(DEFAULT_LINK_KIND_KEY) or LinkKind.SYMBOLIC.value
    return LinkKind.parse(link_kind)


@app.command
def init() -> None:
    """Create a link store in the current directory."""
    try:
        store = LinkStore.init(Path.cwd())
    except FslinkError as e:
        report_error(e)
        return
    print(f"Initialized link store in {store.marker_dir}")


@app.command
def create(source: Path, target: Path, link_kind: str | None = None) -> None:
    """Create a new link and track it.

    Args:
        source: Existing file or directory the link points to
        target: Path of the link to create
        link_kind: symbolic or hard (defaults to the default_link_kind setting)
    """
    try:
        store = get_store()
        record = manager.create_link(store, source, target, resolve_link_kind(link_kind))
    except (FslinkError, ValueError) as e:
        report_error(e)
        return
    print(f"Link created: {record.describe()}")


@app.command
def remove(target: Path) -> None:
    """Remove a tracked link from the filesystem.

    Args:
        target: Path of the tracked link
    """
    try:
        result = manager.remove_link(get_store(), target)
    except FslinkError as e:
        report_error(e)
        return

    if result.outcome is RemoveOutcome.NOT_TRACKED:
        report_error(f"No tracked link found for target: {result.target}")
    elif result.outcome is RemoveOutcome.NOT_PRESENT:
        print(f"Link not present in filesystem: {result.record.describe()}")
    else:
        print(f"Link removed: {result.record.describe()}")


@app.command(name="list")
def list_command() -> None:
    """List all tracked links."""
    try:
        records = manager.list_links(get_store())
    except FslinkError as e:
        report_error(e)
        return

    if not records:
        print("No tracked links")
        return

    print(f"Tracked links ({len(records)}):\n")
    for record in records:
        marker = "●" if record.exists else "○"
        print(f"{marker} {record.describe()}")


@app.command
def toggle(target: Path) -> None:
    """Toggle a tracked link between present and absent.

    Args:
        target: Path of the tracked link
    """
    try:
        record = manager.toggle_link(get_store(), target)
    except FslinkError as e:
        report_error(e)
        return
    print(f"Toggled link: {record.describe()}")


@app.command
def forget(target: Path) -> None:
    """Stop tracking a link, leaving the filesystem unchanged.

    Args:
        target: Path of the tracked link
    """
    try:
        record = manager.forget_link(get_store(), target)
    except FslinkError as e:
        report_error(e)
        return
    print(f"Forgot link: {record.describe()}")


@app.meta.default
def main(
    *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    log_level: Literal["debug", "info", "warning", "error", "critical"] = "critical",
) -> None:
    """Main entry point with global options."""
    configure_logging(log_level)
    app(tokens)


def run() -> None:
    """Console script entry point."""
    app.meta()


if __name__ == "__main__":
    run()
