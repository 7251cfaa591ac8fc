import json

import pytest
from click.testing import CliRunner

from main import cli


@pytest.fixture
def run(fake_at, config_path):
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, list(args))
    return _run


def test_add(run, fake_at):
    fake_at.queue_output("job 12 at Sat Oct 17 10:00:00 2026")
    result = run("add", "echo hi", "-t", "now + 1min", "-q", "t")

    assert result.exit_code == 0
    assert "Job 12 scheduled for Sat Oct 17 10:00:00 2026" in result.output
    assert fake_at.commands == ["printf '%s\\n' 'echo hi' | /usr/bin/at -q t 'now + 1min'"]


def test_add_failure_exit_code(run, fake_at):
    fake_at.queue_output("Garbled time")
    result = run("add", "echo hi", "-t", "whenever")
    assert result.exit_code == 3


def test_add_bad_queue(run, fake_at):
    result = run("add", "echo hi", "-t", "noon", "-q", "9")
    assert result.exit_code == 2
    assert fake_at.commands == []


def test_add_file(run, fake_at, tmp_path):
    script = tmp_path / "job.sh"
    script.write_text("echo hi\n")
    fake_at.queue_output("job 8 at Sat Oct 17 10:00:00 2026")
    result = run("add-file", str(script), "-t", "noon")

    assert result.exit_code == 0
    assert fake_at.commands == [f"/usr/bin/at -f {script} noon"]


def test_list_table(run, fake_at):
    fake_at.queue_output("17\tMon Nov 15 10:55:00 2010 a simon")
    result = run("list")

    assert result.exit_code == 0
    assert "simon" in result.output
    assert "Scheduled" in result.output


def test_list_json(run, fake_at):
    fake_at.queue_output("17\tMon Nov 15 10:55:00 2010 a simon")
    result = run("list", "--json", "-q", "a")

    assert json.loads(result.output) == {
        "job_number": 17, "date": "Mon Nov 15 10:55:00 2010", "queue": "a", "user": "simon",
    }
    assert fake_at.commands == ["/usr/bin/at -l -q a"]


def test_list_empty(run, fake_at):
    result = run("list")
    assert "No jobs found." in result.output


def test_remove_partial_failure(run, fake_at):
    fake_at.queue_output()
    fake_at.queue_output("Cannot find jobid 9")
    result = run("remove", "4", "9")

    assert result.exit_code == 4
    assert "Removed job 4" in result.output
    assert fake_at.commands == ["/usr/bin/at -d 4", "/usr/bin/at -d 9"]


def test_show(run, fake_at):
    fake_at.queue_output("#!/bin/sh", "echo hi")
    result = run("show", "5")
    assert result.output.endswith("echo hi\n")


def test_global_overrides(run, fake_at):
    fake_at.queue_output("job 1 at 2026-10-17 10:02")
    result = run("--binary", "/opt/at", "--no-escape", "add", "echo hi", "-t", "now + 1min")

    assert result.exit_code == 0
    assert fake_at.commands == ["echo 'echo hi' | /opt/at now + 1min"]


def test_config_set_and_show(run, config_path):
    assert run("config", "set", "binary", "/opt/at").exit_code == 0
    result = run("config", "show")
    assert "binary: /opt/at" in result.output
    assert json.loads(config_path.read_text())["binary"] == "/opt/at"


def test_config_set_unknown_key(run):
    assert run("config", "set", "colour", "blue").exit_code == 2


def test_malformed_config(fake_at, config_path):
    config_path.write_text("{not json")
    result = CliRunner().invoke(cli, ["list"])

    assert result.exit_code == 2
    assert "Malformed config file" in result.output
    assert fake_at.commands == []
