import logging
import subprocess
import threading

import pytest

from anchorflow.config import Config


class StubRunner(object):
    """Stands in for subprocess.run and records every command"""

    def __init__(self, returncodes=None, stdout="", error=None, release=None):
        self.returncodes = returncodes or {}
        self.stdout = stdout
        self.error = error
        self.release = release
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, cmd, **kwargs):
        with self._lock:
            self.calls.append((list(cmd), kwargs))
        if self.release is not None:
            self.release.wait(timeout=10)
        if self.error is not None:
            raise self.error
        returncode = 0
        for token, code in self.returncodes.items():
            if token in cmd:
                returncode = code
        return subprocess.CompletedProcess(cmd, returncode, stdout=self.stdout)

    @property
    def commands(self):
        return [cmd for cmd, _ in self.calls]


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging.getLogger().handlers.clear()


@pytest.fixture
def write_file(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path
    return _write


@pytest.fixture
def make_config(tmp_path):
    def _make(**entries):
        return Config(entries=entries, source=tmp_path / "run.conf")
    return _make
