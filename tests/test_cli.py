"""Tests for the fslink command line."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from fslink_manager import cli, config_commands
from fslink_manager.models import LinkKind
from fslink_manager.store import LinkStore


@pytest.fixture(autouse=True)
def quiet_logging() -> Iterator[None]:
    """Silence log output so only command output is captured."""
    cli.configure_logging("critical")
    yield
    structlog.reset_defaults()


@pytest.fixture
def in_workdir(workdir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(workdir)
    return workdir


def test_init(in_workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test creating a store in the current directory."""
    cli.init()
    assert (in_workdir / ".fslink" / "links").is_dir()
    assert "Initialized link store" in capsys.readouterr().out


def test_commands_without_store(in_workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that commands outside a store report an error and return."""
    cli.list_command()
    captured = capsys.readouterr()
    assert "Run 'fslink init'" in captured.err
    assert captured.out == ""


def test_create_and_list(
    store: LinkStore, source_file: Path, in_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test creating a link and seeing it listed."""
    cli.create(Path("file.txt"), Path("link.txt"))
    assert "Link created" in capsys.readouterr().out
    assert (in_workdir / "link.txt").is_symlink()

    cli.list_command()
    out = capsys.readouterr().out
    assert "Tracked links (1)" in out
    assert f"● {source_file} -> {in_workdir / 'link.txt'} (symbolic, present)" in out


def test_create_uses_configured_default_kind(
    store: LinkStore, source_file: Path, in_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that create falls back to the default_link_kind setting."""
    config_commands.set("default_link_kind", "Hardlink")
    assert "Set default_link_kind = hard (local)" in capsys.readouterr().out

    cli.create(Path("file.txt"), Path("hard.txt"))
    record = store.get_by_target_path(in_workdir / "hard.txt")
    assert record.link_kind is LinkKind.HARD
    assert not (in_workdir / "hard.txt").is_symlink()


def test_create_reports_validation_error(
    store: LinkStore, in_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that a missing source is printed as an error."""
    cli.create(Path("missing.txt"), Path("link.txt"))
    assert "source does not exist" in capsys.readouterr().err


def test_create_rejects_unknown_kind(
    store: LinkStore, source_file: Path, in_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that an invalid link kind is reported."""
    cli.create(Path("file.txt"), Path("link.txt"), link_kind="junction")
    assert "Unknown link kind" in capsys.readouterr().err
    assert not os.path.lexists(in_workdir / "link.txt")


def test_create_twice(
    store: LinkStore, source_file: Path, in_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test that creating a tracked pair again is refused."""
    cli.create(Path("file.txt"), Path("link.txt"))
    cli.create(Path("file.txt"), Path("link.txt"))
    assert "already tracked" in capsys.readouterr().err


def test_remove_outcomes(
    store: LinkStore, source_file: Path, in_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test the three remove results."""
    cli.create(Path("file.txt"), Path("link.txt"))
    capsys.readouterr()

    cli.remove(Path("link.txt"))
    assert "Link removed" in capsys.readouterr().out

    cli.remove(Path("link.txt"))
    assert "Link not present in filesystem" in capsys.readouterr().out

    cli.remove(Path("other.txt"))
    assert "No tracked link found for target" in capsys.readouterr().err


def test_toggle_and_forget(
    store: LinkStore, source_file: Path, in_workdir: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Test toggling then forgetting a link."""
    cli.create(Path("file.txt"), Path("link.txt"))
    cli.toggle(Path("link.txt"))
    assert "(symbolic, absent)" in capsys.readouterr().out
    assert not os.path.lexists(in_workdir / "link.txt")

    cli.forget(Path("link.txt"))
    assert "Forgot link" in capsys.readouterr().out

    cli.toggle(Path("link.txt"))
    assert "No tracked link found" in capsys.readouterr().err


def test_list_empty(store: LinkStore, in_workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test listing an empty store."""
    cli.list_command()
    assert "No tracked links" in capsys.readouterr().out


def test_config_commands(store: LinkStore, in_workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test config get/list/unset output."""
    config_commands.get("default_link_kind")
    assert "default_link_kind is not set" in capsys.readouterr().out

    config_commands.set("default_link_kind", "symbolic", global_=True)
    config_commands.list_config()
    assert "default_link_kind = symbolic" in capsys.readouterr().out

    config_commands.unset("default_link_kind", global_=True)
    config_commands.list_config(global_=True)
    assert "No global configuration settings" in capsys.readouterr().out


def test_config_set_rejects_bad_kind(store: LinkStore, in_workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Test that default_link_kind is validated."""
    config_commands.set("default_link_kind", "junction")
    assert "Unknown link kind" in capsys.readouterr().err
