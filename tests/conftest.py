from typing import Callable

import pytest


class FakeRunner:
    """
    Records command lines instead of running them.

    Statuses are looked up by command prefix; a status may be a callable that
    receives the command and returns the status.
    """

    def __init__(self, statuses: dict[str, int | Callable[[str], int]] | None = None):
        self.statuses = statuses or {}
        self.commands: list[str] = []

    def run(self, command: str, verbose: bool = False) -> int:
        self.commands.append(command)
        for prefix, status in self.statuses.items():
            if command.startswith(prefix):
                return status(command) if callable(status) else status
        return 0

    def ran(self, prefix: str) -> bool:
        return any(c.startswith(prefix) for c in self.commands)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path
