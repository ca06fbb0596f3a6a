"""Tests for relative path computation."""

import os

import pytest

from m3uexport.errors import PathResolutionError
from m3uexport.export.paths import relativize


def test_target_inside_base(tmp_path):
    base = tmp_path / "music"
    target = base / "Artist" / "Album" / "01.flac"
    assert relativize(base, target) == os.path.join("Artist", "Album", "01.flac")


def test_target_outside_base_uses_parent_segments(tmp_path):
    base = tmp_path / "music" / "export"
    target = tmp_path / "music" / "a.mp3"
    assert relativize(base, target) == os.path.join("..", "a.mp3")


def test_sibling_tree(tmp_path):
    base = tmp_path / "music" / "playlists" / "mine"
    target = tmp_path / "music" / "rock" / "b.mp3"
    assert relativize(base, target) == os.path.join("..", "..", "rock", "b.mp3")


def test_inputs_are_normalized(tmp_path):
    base = f"{tmp_path}{os.sep}music{os.sep}.{os.sep}export{os.sep}"
    target = f"{tmp_path}{os.sep}music{os.sep}export{os.sep}..{os.sep}a.mp3"
    assert relativize(base, target) == os.path.join("..", "a.mp3")


@pytest.mark.parametrize("relative", ["a.mp3", os.path.join("x", "y", "z.ogg"), "with space.mp3"])
def test_left_inverse_of_join(tmp_path, relative):
    base = str(tmp_path / "export")
    assert relativize(base, os.path.join(base, relative)) == relative


def test_accepts_str_and_path(tmp_path):
    assert relativize(str(tmp_path), str(tmp_path / "a.mp3")) == relativize(tmp_path, tmp_path / "a.mp3")


@pytest.mark.parametrize("target", ["", "   ", "/music/bad\x00name.mp3"])
def test_unresolvable_target_raises(tmp_path, target):
    with pytest.raises(PathResolutionError):
        relativize(tmp_path, target)


def test_unresolvable_base_raises():
    with pytest.raises(ValueError):
        relativize("", "/music/a.mp3")
