"""
Tests for Reporters and the Command-Line Interface
"""

import csv
import io
import json
from datetime import timezone

import pytest

from logchecker.__main__ import main
from logchecker.analyzer import analyze
from logchecker.reporters import (
    get_reporter, ConsoleReporter, JSONReporter, CSVReporter,
)


SSH_FAILURE = "Jan  1 00:00:00 host sshd[1]: Failed password for root from 10.0.0.5 port 22 ssh2"
NOT_FOUND = '10.0.0.1 - - [10/Oct/2023:13:55:36 +0000] "GET /admin HTTP/1.1" 404 12 "-" "curl/7.68.0"'
BENIGN = '10.0.0.2 - - [10/Oct/2023:13:55:36 +0000] "GET / HTTP/1.1" 200 12 "-" "Mozilla/5.0"'


@pytest.fixture
def sample_result():
    return analyze("\n".join([NOT_FOUND] + [SSH_FAILURE] * 6))


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "access.log"
    path.write_text("\n".join([NOT_FOUND] + [SSH_FAILURE] * 6) + "\n")
    return path


class TestReporters:
    """Tests for report rendering."""

    def test_console_report(self, sample_result):
        output = ConsoleReporter(use_colors=False).generate(sample_result)

        assert "Lines analyzed:   7" in output
        assert "Brute Force:" in output
        assert "[HTTP Error] HTTP 404 from 10.0.0.1" in output
        assert "[Brute Force] 6 failed logins from 10.0.0.5" in output
        assert NOT_FOUND in output
        assert "\033[" not in output

    def test_console_no_anomalies(self):
        output = ConsoleReporter(use_colors=False).generate(analyze(BENIGN))

        assert "No anomalies detected." in output

    def test_console_truncates(self, sample_result):
        output = ConsoleReporter(use_colors=False, max_anomalies=1).generate(sample_result)

        assert "... and 2 more anomalies" in output

    def test_json_report(self, sample_result):
        data = json.loads(JSONReporter().generate(sample_result))

        assert data["summary"] == {"HTTP Error": 1, "Brute Force": 1, "Suspicious UA": 1}
        assert len(data["entries"]) == 7

    def test_json_without_entries(self, sample_result):
        data = json.loads(JSONReporter(include_entries=False).generate(sample_result))

        assert "entries" not in data
        assert len(data["anomalies"]) == 3

    def test_csv_report(self, sample_result):
        rows = list(csv.DictReader(io.StringIO(CSVReporter().generate(sample_result))))

        assert [r["type"] for r in rows] == ["HTTP Error", "Brute Force", "Suspicious UA"]
        assert rows[0]["source_line"] == NOT_FOUND
        assert rows[1]["source_line"] == ""

    def test_save(self, sample_result, tmp_path):
        target = tmp_path / "report.json"

        JSONReporter().save(sample_result, str(target))

        assert json.loads(target.read_text())["summary"]["Brute Force"] == 1

    def test_get_reporter(self):
        assert isinstance(get_reporter("JSON"), JSONReporter)
        assert isinstance(get_reporter("console"), ConsoleReporter)
        with pytest.raises(ValueError):
            get_reporter("html")


class TestCLI:
    """Tests for the command-line interface."""

    def test_analyze_file(self, log_file, capsys):
        code = main(["--no-color", "analyze", str(log_file)])

        out = capsys.readouterr().out
        assert code == 1
        assert "6 failed logins from 10.0.0.5" in out

    def test_benign_exit_code(self, tmp_path, capsys):
        path = tmp_path / "ok.log"
        path.write_text(BENIGN + "\n")

        assert main(["analyze", str(path)]) == 0

    def test_json_format(self, log_file, capsys):
        main(["analyze", str(log_file), "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["HTTP Error"] == 1

    def test_threshold_flag(self, log_file, capsys):
        main(["analyze", str(log_file), "-f", "json", "--brute-force-threshold", "10"])

        data = json.loads(capsys.readouterr().out)
        assert "Brute Force" not in data["summary"]

    def test_rules_flag(self, log_file, capsys):
        main(["analyze", str(log_file), "-f", "json", "--rules", "bruteforce, errorspike"])

        data = json.loads(capsys.readouterr().out)
        assert data["summary"] == {"HTTP Error": 1, "Brute Force": 1}

    def test_unknown_rule(self, log_file, capsys):
        code = main(["analyze", str(log_file), "--rules", "bruteforce,portscan"])

        captured = capsys.readouterr()
        assert code == 1
        assert "Unknown rule: portscan" in captured.err
        assert captured.out == ""

    def test_local_time_flag(self, log_file, monkeypatch, capsys):
        monkeypatch.setattr("logchecker.__main__.local_timezone", lambda: timezone.utc)

        code = main(["analyze", str(log_file), "-f", "json", "--local-time"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["summary"]["Brute Force"] == 1

    def test_multiple_files_are_combined(self, tmp_path, capsys):
        first = tmp_path / "a.log"
        second = tmp_path / "b.log"
        first.write_text("\n".join([SSH_FAILURE] * 3))
        second.write_text("\n".join([SSH_FAILURE] * 3))

        main(["analyze", str(first), str(second), "-f", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["summary"] == {"Brute Force": 1}
        assert len(data["entries"]) == 6

    def test_output_file(self, log_file, tmp_path, capsys):
        target = tmp_path / "report.csv"

        main(["analyze", str(log_file), "-f", "csv", "-o", str(target)])

        assert "Report saved to" in capsys.readouterr().out
        assert target.read_text().startswith("type,message,source_line")

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("\n".join([SSH_FAILURE] * 6)))

        code = main(["analyze", "-", "-f", "json"])

        assert code == 1
        assert json.loads(capsys.readouterr().out)["summary"] == {"Brute Force": 1}

    def test_missing_file(self, tmp_path, capsys):
        code = main(["analyze", str(tmp_path / "nope.log")])

        assert code == 1
        assert "Error reading" in capsys.readouterr().err

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
