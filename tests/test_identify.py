"""Tests for image discovery and the dimension probe."""

import subprocess
from pathlib import Path
from types import SimpleNamespace

import pytest

from src.magick import identify
from src.magick.errors import CommandLineError, NotIdentifiedError, ProbeError
from src.magick.geometry import Geometry


def test_iter_image_paths_filters_and_sorts(tmp_path):
    for name in ("b.png", "a.JPG", "notes.txt", "sub/c.webp"):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()

    found = list(identify.iter_image_paths(tmp_path))

    assert found == [tmp_path / "a.JPG", tmp_path / "b.png", tmp_path / "sub" / "c.webp"]


def test_iter_image_paths_single_file(tmp_path):
    image = tmp_path / "one.png"
    image.touch()
    text = tmp_path / "one.txt"
    text.touch()

    assert list(identify.iter_image_paths(image)) == [image]
    assert list(identify.iter_image_paths(text)) == []


def test_file_path_accepts_paths_and_upload_objects(tmp_path):
    target = tmp_path / "upload.png"
    assert identify.file_path(str(target)) == target
    assert identify.file_path(target) == target
    assert identify.file_path(SimpleNamespace(path=str(target))) == target
    assert identify.file_path(SimpleNamespace(name=target)) == target


def test_file_path_rejects_unknown_objects():
    with pytest.raises(TypeError):
        identify.file_path(object())


def test_run_returns_stdout(fake_run):
    fake_run.result["stdout"] = "hello\n"
    assert identify.run("echo", "hello") == "hello\n"
    assert fake_run.calls == [["echo", "hello"]]


def test_run_raises_on_failure(fake_run):
    fake_run.result.update(returncode=1, stderr="no such image")

    with pytest.raises(CommandLineError) as excinfo:
        identify.run("identify", "missing.png")

    assert excinfo.value.returncode == 1
    assert excinfo.value.command == ["identify", "missing.png"]
    assert "no such image" in str(excinfo.value)


def test_run_raises_when_executable_is_missing(monkeypatch):
    def _missing(argv, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", argv[0])

    monkeypatch.setattr(subprocess, "run", _missing)

    with pytest.raises(CommandLineError) as excinfo:
        identify.run("identify", "a.png")

    assert excinfo.value.returncode is None
    assert isinstance(excinfo.value, ProbeError)


def test_identify_backend_reads_first_frame(fake_run, tmp_path):
    fake_run.result["stdout"] = "640x480\n"
    image = tmp_path / "anim.gif"

    assert identify.identify_dimensions(image, backend="identify") == "640x480"
    assert fake_run.calls == [["identify", "-format", "%wx%h", f"{image}[0]"]]


def test_pillow_backend(make_image):
    image = make_image("small.png", (30, 20))
    assert identify.identify_dimensions(image, backend="pillow") == "30x20"


def test_pillow_backend_rejects_non_images(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"not an image")

    with pytest.raises(ProbeError):
        identify.identify_dimensions(broken, backend="pillow")


def test_unknown_backend():
    with pytest.raises(ValueError, match="Unknown probe backend"):
        identify.identify_dimensions(Path("a.png"), backend="exiftool")


def test_geometry_from_file(fake_run, tmp_path):
    fake_run.result["stdout"] = "1024x768"
    upload = SimpleNamespace(path=str(tmp_path / "photo.jpg"))

    assert Geometry.from_file(upload) == Geometry(1024, 768)


def test_geometry_from_file_with_pillow(make_image):
    image = make_image("photo.png", (120, 90))
    assert Geometry.from_file(image, backend="pillow") == Geometry(120, 90)


def test_geometry_from_file_raises_when_probe_fails(fake_run, tmp_path):
    fake_run.result.update(returncode=1, stderr="identify: no decode delegate")
    image = tmp_path / "document.xyz"

    with pytest.raises(NotIdentifiedError, match="is not recognized by the 'identify' command"):
        Geometry.from_file(image)


def test_geometry_from_file_raises_on_empty_output(fake_run, tmp_path):
    fake_run.result["stdout"] = "\n"

    with pytest.raises(NotIdentifiedError):
        Geometry.from_file(tmp_path / "empty.png")
