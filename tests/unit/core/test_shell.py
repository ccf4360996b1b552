import subprocess
from unittest.mock import patch

import pytest

from sitebox.core.shell import CommandRunner
from sitebox.errors import ExternalToolError


def test_run_passes_arguments_and_cwd(tmp_path):
    runner = CommandRunner(cwd=tmp_path)
    with patch("subprocess.run") as mock_run:
        mock_run.return_value.returncode = 0
        runner.run(["docker", "build", "-t", "img", "."])

    args, kwargs = mock_run.call_args
    assert args[0] == ["docker", "build", "-t", "img", "."]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["check"] is False


def test_run_nonzero_exit_raises():
    with patch("subprocess.run") as mock_run:
        mock_run.return_value.returncode = 125
        with pytest.raises(ExternalToolError) as exc:
            CommandRunner().run(["docker", "run", "img"])

    assert exc.value.returncode == 125
    assert exc.value.command == ["docker", "run", "img"]
    assert "exit code 125" in str(exc.value)


def test_run_missing_executable_raises():
    with patch("subprocess.run", side_effect=FileNotFoundError("docker")):
        with pytest.raises(ExternalToolError, match="executable not found") as exc:
            CommandRunner().run(["docker", "ps"])
    assert exc.value.returncode is None


def test_output_returns_stdout():
    with patch("subprocess.run") as mock_run:
        mock_run.return_value.returncode = 0
        mock_run.return_value.stdout = "CONTAINER ID   NAMES\nabc   example-site\n"
        out = CommandRunner().output(["docker", "ps", "--all"])

    assert "example-site" in out
    kwargs = mock_run.call_args[1]
    assert kwargs["stdout"] == subprocess.PIPE
    assert kwargs["stderr"] == subprocess.PIPE
    assert kwargs["text"] is True


def test_output_can_merge_stderr():
    with patch("subprocess.run") as mock_run:
        mock_run.return_value.returncode = 0
        mock_run.return_value.stdout = "Web Server is available\n"
        CommandRunner().output(["docker", "logs", "web"], merge_stderr=True)

    assert mock_run.call_args[1]["stderr"] == subprocess.STDOUT


def test_output_failure_includes_last_stderr_line():
    with patch("subprocess.run") as mock_run:
        mock_run.return_value.returncode = 1
        mock_run.return_value.stdout = ""
        mock_run.return_value.stderr = "warning\nError: No such container: web\n"
        with pytest.raises(ExternalToolError) as exc:
            CommandRunner().output(["docker", "logs", "web"])

    assert str(exc.value).endswith("Error: No such container: web")
    assert exc.value.returncode == 1
