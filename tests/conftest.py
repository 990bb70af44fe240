# tests/conftest.py
import signal
import stat
import sys

import pytest


@pytest.fixture
def fake_fping(tmp_path):
    """Returns a factory writing a /bin/sh stand-in for fping and giving back its path."""
    if sys.platform == "win32":
        pytest.skip("uses a /bin/sh stand-in for fping")

    def make(body: str, name: str = "fping") -> str:
        script = tmp_path / name
        script.write_text("#!/bin/sh\n" + body)
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script)

    return make


@pytest.fixture
def restore_signals():
    saved = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    yield
    for sig, handler in saved.items():
        signal.signal(sig, handler)
