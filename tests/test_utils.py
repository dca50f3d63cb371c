import logging

from rskid import utils
from rskid.utils import ShellRunner, exit_status, mapping_set, run_catching


def test_mapping_set_creates_intermediate_mappings():
    data = {}
    assert mapping_set(data, "compiler", "flags", value="-g") is True
    assert data == {"compiler": {"flags": "-g"}}
    assert mapping_set(data, "compiler", "flags", value="-g") is False
    assert mapping_set(data, "compiler", "target", value="") is True
    assert data == {"compiler": {"flags": "-g", "target": ""}}


def test_run_catching_returns_handler_result(caplog):
    caplog.set_level(logging.DEBUG)

    def _fail():
        raise OSError("boom")

    assert run_catching(_fail) is None
    assert "boom" in caplog.text
    assert run_catching(_fail, exception_handler=lambda e: str(e)) == "boom"
    assert run_catching(int, "7") == 7


def test_exit_status():
    assert exit_status(0) == 0
    assert exit_status(101) == 101
    assert exit_status(-9) == 137


def test_shell_runner_returns_exit_status(tmp_path):
    runner = ShellRunner(cwd=tmp_path)
    assert runner.run("true") == 0
    assert runner.run("exit 3") == 3
    assert runner.run("echo hi > out.txt && test -f out.txt") == 0
    assert (tmp_path / "out.txt").read_text() == "hi\n"


def test_shell_runner_logs_command_when_verbose(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    ShellRunner(cwd=tmp_path).run("true", verbose=True)
    assert "Executing: true" in caplog.text


def test_logger_uses_file_stem():
    assert utils.logger(__file__).name == "test_utils"
