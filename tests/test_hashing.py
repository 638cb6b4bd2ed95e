"""Tests for storage key derivation."""

import itertools
import re
from pathlib import Path

from fslink_manager.hashing import KEY_BYTES, derive_key


def test_key_is_deterministic() -> None:
    """Test that equal inputs give equal keys."""
    assert derive_key("/a/file.txt", "/a/link.txt") == derive_key("/a/file.txt", "/a/link.txt")


def test_key_accepts_paths() -> None:
    """Test that Path and str inputs hash the same."""
    assert derive_key(Path("/a/file.txt"), Path("/a/link.txt")) == derive_key("/a/file.txt", "/a/link.txt")


def test_key_format() -> None:
    """Test that keys are fixed-width lowercase hex."""
    key = derive_key("/a/file.txt", "/a/link.txt")
    assert len(key) == KEY_BYTES * 2
    assert re.fullmatch(r"[0-9a-f]+", key)


def test_key_is_order_sensitive() -> None:
    """Test that swapping source and target changes the key."""
    assert derive_key("/a", "/b") != derive_key("/b", "/a")


def test_key_boundary_is_unambiguous() -> None:
    """Test that moving characters across the source/target boundary changes the key."""
    assert derive_key("/a|b", "/c") != derive_key("/a", "b|/c")
    assert derive_key("/ab", "/c") != derive_key("/a", "b/c")


def test_no_collisions_in_corpus() -> None:
    """Test that a corpus of representative paths yields distinct keys."""
    dirs = ["/", "/home/user", "/home/user/.config", "/tmp", "/var/lib/app", "/srv/data dir"]
    names = ["file.txt", "link", ".bashrc", "a", "b", "notes.md", "ünïcödé", "x y"]
    paths = [str(Path(d) / n) for d in dirs for n in names]

    pairs = list(itertools.permutations(paths, 2))
    keys = {derive_key(source, target) for source, target in pairs}
    assert len(keys) == len(pairs)
