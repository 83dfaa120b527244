from typing import Dict, Iterable

import pytest

from logfixtures import log_line


@pytest.fixture
def write_log(tmp_path):
    """Write payloads as Player.log lines; returns the log path."""
    path = tmp_path / "Player.log"

    def _write(payloads: Iterable[Dict], mode: str = "w", noise: bool = True) -> str:
        with open(path, mode, encoding="utf-8") as f:
            for payload in payloads:
                if noise:
                    f.write("[UnityCrossThreadLogger]Unrelated noise line\n")
                f.write(log_line(payload) + "\n")
        return str(path)

    return _write
