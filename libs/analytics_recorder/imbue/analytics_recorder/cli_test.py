import json
from pathlib import Path

from click.testing import CliRunner

from imbue.analytics_recorder.cli import cli
from imbue.analytics_recorder.consts import EVENT_BUILDER_PROJECT_CREATE
from imbue.analytics_recorder.event_store import list_event_files


def test_record_writes_event_to_env_cache_dir(cli_runner: CliRunner, cache_dir: Path) -> None:
    result = cli_runner.invoke(cli, ["record", EVENT_BUILDER_PROJECT_CREATE])

    assert result.exit_code == 0, result.output
    event_path = Path(result.output.strip())
    assert event_path.parent == cache_dir
    assert json.loads(event_path.read_text())["event"] == EVENT_BUILDER_PROJECT_CREATE


def test_record_honors_namespace_and_cache_dir(cli_runner: CliRunner, tmp_path: Path) -> None:
    explicit_dir = tmp_path / "explicit"

    result = cli_runner.invoke(cli, ["record", "foo", "--cache-dir", str(explicit_dir), "--namespace", "builder"])

    assert result.exit_code == 0, result.output
    assert list_event_files(explicit_dir / "builder") == [Path(result.output.strip())]


def test_record_rejects_empty_event_name(cli_runner: CliRunner, cache_dir: Path) -> None:
    result = cli_runner.invoke(cli, ["record", ""])

    assert result.exit_code == 2
    assert "cannot be empty" in result.output
    assert not cache_dir.exists()


def test_record_rejects_escaping_namespace(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["record", "foo", "--namespace", "../up"])

    assert result.exit_code == 2
    assert "single directory name" in result.output


def test_record_reports_fatal_io_error(cli_runner: CliRunner, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    result = cli_runner.invoke(cli, ["record", "foo", "--cache-dir", str(blocker / "analytics")])

    assert result.exit_code == 1
    assert "Unable to create client id file" in result.output


def test_list_prints_recorded_events_oldest_first(cli_runner: CliRunner, cache_dir: Path) -> None:
    cli_runner.invoke(cli, ["record", "first"])
    cli_runner.invoke(cli, ["record", "second"])

    result = cli_runner.invoke(cli, ["list"])

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert [line.split(" ")[1] for line in lines] == ["first", "second"]
    client_id = (cache_dir / "CLIENT_ID").read_text()
    assert all(line.endswith(client_id) for line in lines)


def test_list_on_empty_cache_prints_nothing(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["list"])

    assert result.exit_code == 0
    assert result.output == ""


def test_log_level_option_is_case_insensitive(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--log-level", "debug", "list"])

    assert result.exit_code == 0, result.output
