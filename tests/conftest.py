import subprocess
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def make_image(tmp_path):
    """Return a factory writing a blank RGB image of the given size."""

    def _make(name: str, size, directory: Path = None) -> Path:
        path = (directory or tmp_path) / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", size).save(path)
        return path

    return _make


@pytest.fixture
def fake_run(monkeypatch):
    """Replace ``subprocess.run`` and record the argument vectors it receives."""

    calls = []
    result = {"returncode": 0, "stdout": "", "stderr": ""}

    def _run(argv, **kwargs):
        calls.append(list(argv))
        return subprocess.CompletedProcess(
            argv, result["returncode"], stdout=result["stdout"], stderr=result["stderr"]
        )

    monkeypatch.setattr(subprocess, "run", _run)
    _run.calls = calls
    _run.result = result
    return _run
