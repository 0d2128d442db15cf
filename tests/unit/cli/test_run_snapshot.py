# tests/unit/cli/test_run_snapshot.py
from click.testing import CliRunner

from stockops.cli import run_snapshot as cli_module
from stockops.core.exceptions import StoreOperationError


def test_run_snapshot_prints_confirmation(mocker, settings):
    mocker.patch.object(cli_module, "get_settings", return_value=settings)
    mocker.patch.object(cli_module, "configure_logging")
    capture = mocker.patch.object(
        cli_module, "capture",
        new=mocker.AsyncMock(return_value="Opening stock snapshot captured successfully"),
    )

    result = CliRunner().invoke(cli_module.run_snapshot, ["--operator", "night-shift"])

    assert result.exit_code == 0
    assert "Opening stock snapshot captured successfully" in result.output
    assert capture.await_args.args == (settings, "night-shift")


def test_run_snapshot_failure_exits_nonzero(mocker, settings):
    mocker.patch.object(cli_module, "get_settings", return_value=settings)
    mocker.patch.object(cli_module, "configure_logging")
    mocker.patch.object(
        cli_module, "capture",
        new=mocker.AsyncMock(side_effect=StoreOperationError("permission denied for function")),
    )

    result = CliRunner().invoke(cli_module.run_snapshot, [])

    assert result.exit_code == 1
    assert "Snapshot failed: permission denied for function" in result.output
