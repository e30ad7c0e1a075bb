"""Tests for the robust-tags command-line interface."""

import io
import json
import logging
import sys

import pytest

from robust_tag_parser.cli.main import (
    CLIConfig,
    ExtractionProcessor,
    create_argument_parser,
    format_output,
    main,
)
from robust_tag_parser.shared import ParserConfig


@pytest.fixture(autouse=True)
def restore_package_log_level():
    package_logger = logging.getLogger("robust_tag_parser")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def broken_page(tmp_path):
    path = tmp_path / "broken.html"
    path.write_text("<div>Start content</div></div>", encoding="utf-8")
    return path


@pytest.fixture
def clean_page(tmp_path):
    path = tmp_path / "clean.html"
    path.write_text("<ul><li>one</li><li>two</li></ul>", encoding="utf-8")
    return path


class TestArgumentParser:
    """Tests for argument parsing."""

    def test_extract_arguments(self):
        """Test repeated --tag options are collected."""
        args = create_argument_parser().parse_args(
            ["extract", "a.html", "b.html", "-t", "div", "--tag", "p", "--store-errors"]
        )
        assert args.command == "extract"
        assert args.paths == ["a.html", "b.html"]
        assert args.tags == ["div", "p"]
        assert args.store_errors is True
        assert args.format is None

    def test_extract_requires_tag(self):
        """Test --tag is mandatory."""
        with pytest.raises(SystemExit):
            create_argument_parser().parse_args(["extract", "a.html"])

    def test_version(self, capsys):
        """Test --version prints the package version."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_no_command(self, capsys):
        """Test running without a command prints help and fails."""
        assert main([]) == 1
        assert "robust-tags" in capsys.readouterr().out


class TestExtractCommand:
    """Tests for the extract command."""

    def test_json_with_stored_errors(self, broken_page, capsys):
        """Test JSON output carries records and stored errors."""
        exit_code = main([
            "extract", str(broken_page), "-t", "div", "--format", "json", "--store-errors",
        ])

        assert exit_code == 1
        captured = capsys.readouterr()
        results = json.loads(captured.out)
        assert results[0]["success"] is True
        assert results[0]["records"] == [
            {"tag": "div", "content": "Start content"},
            {"tag": "MALFORMED", "content": "Unexpected closing tag </div> at position 24"},
        ]
        assert results[0]["malformed_count"] == 1
        assert results[0]["errors"] == ["Error: Unexpected closing tag </div> at position 24"]
        assert captured.err == ""

    def test_display_mode_writes_errors_to_stderr(self, broken_page, capsys):
        """Test errors are displayed as found without --store-errors."""
        main(["extract", str(broken_page), "-t", "div", "-f", "json"])

        captured = capsys.readouterr()
        assert "Error: Unexpected closing tag </div> at position 24" in captured.err
        assert json.loads(captured.out)[0]["errors"] == []

    def test_clean_text_output(self, clean_page, capsys):
        """Test the text listing and a zero exit code for clean input."""
        exit_code = main(["extract", str(clean_page), "-t", "li"])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert f"File: {clean_page}" in out
        assert "  [0] Tag: li, Content: one" in out
        assert "  [1] Tag: li, Content: two" in out

    def test_csv_output(self, clean_page, capsys):
        """Test CSV output has one row per record."""
        main(["extract", str(clean_page), "-t", "li", "-f", "csv"])

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "file,index,tag,content"
        assert lines[1:] == [f"{clean_page},0,li,one", f"{clean_page},1,li,two"]

    def test_stdin_input(self, monkeypatch, capsys):
        """Test '-' reads markup from standard input."""
        monkeypatch.setattr(sys, "stdin", io.StringIO("<b>bold</b>"))

        exit_code = main(["extract", "-", "-t", "b", "-f", "json"])

        assert exit_code == 0
        results = json.loads(capsys.readouterr().out)
        assert results[0]["file"] == "-"
        assert results[0]["records"] == [{"tag": "b", "content": "bold"}]

    def test_missing_file(self, tmp_path, capsys):
        """Test an unreadable file is reported and fails the run."""
        missing = tmp_path / "missing.html"

        exit_code = main(["extract", str(missing), "-t", "p"])

        assert exit_code == 1
        out = capsys.readouterr().out
        assert f"File: {missing}" in out
        assert "   Error:" in out

    def test_output_file(self, clean_page, tmp_path, capsys):
        """Test results can be written to a file."""
        output = tmp_path / "out.json"

        exit_code = main(["extract", str(clean_page), "-t", "li", "-f", "json", "-o", str(output)])

        assert exit_code == 0
        assert json.loads(output.read_text())[0]["record_count"] == 2
        assert "Results written to" in capsys.readouterr().err

    def test_context(self, broken_page, capsys):
        """Test --context adds the markup around unexpected closing tags."""
        main(["extract", str(broken_page), "-t", "div", "-f", "json",
              "--store-errors", "--context"])

        contexts = json.loads(capsys.readouterr().out)[0]["contexts"]
        assert contexts == [{
            "position": 24,
            "before": "<div>Start content</div>",
            "at": "<",
            "after": "/div>",
            "verdict": "likely_error",
            "enclosing_tag": "</div>",
        }]

    def test_config_file(self, broken_page, tmp_path, capsys):
        """Test a configuration file sets markers and output format."""
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({
            "parser": {
                "extraction": {"malformed_tag": "BROKEN"},
                "output": {"default_format": "json"},
            },
        }))

        main(["extract", str(broken_page), "-t", "div", "--store-errors",
              "-c", str(config_path)])

        records = json.loads(capsys.readouterr().out)[0]["records"]
        assert records[1]["tag"] == "BROKEN"

    def test_quiet_config_suppresses_info_logs(self, clean_page, tmp_path, caplog):
        """Test the configured logging level applies to the extraction run."""
        caplog.set_level(logging.INFO, logger="robust_tag_parser")
        config_path = tmp_path / "quiet.json"
        config_path.write_text(json.dumps({"parser": ParserConfig.quiet().to_dict()}))

        main(["extract", str(clean_page), "-t", "li", "-c", str(config_path)])

        info_records = [
            r for r in caplog.records
            if r.name.startswith("robust_tag_parser") and r.levelno == logging.INFO
        ]
        assert info_records == []
        assert logging.getLogger("robust_tag_parser").level == logging.WARNING

    def test_default_config_logs_at_info(self, clean_page, caplog):
        """Test the default logging level keeps the run summary and drops debug output."""
        caplog.set_level(logging.DEBUG, logger="robust_tag_parser")

        main(["extract", str(clean_page), "-t", "li", "-f", "json"])

        levels = {r.getMessage(): r.levelno for r in caplog.records}
        assert levels.get("Tag extraction finished") == logging.INFO
        assert "Starting tag extraction" not in levels

    def test_verbose_flag_wins_over_config(self, clean_page, tmp_path):
        """Test --verbose is not overridden by the configured level."""
        config_path = tmp_path / "quiet.json"
        config_path.write_text(json.dumps({"parser": ParserConfig.quiet().to_dict()}))

        main(["-v", "extract", str(clean_page), "-t", "li", "-c", str(config_path)])

        assert logging.getLogger("robust_tag_parser").level == logging.DEBUG


class TestCLIConfig:
    """Tests for CLIConfig loading."""

    def test_defaults(self):
        """Test default CLI configuration."""
        config = CLIConfig()
        assert config.encoding == "utf-8"
        assert config.output_format == "text"
        assert config.include_context is False

    def test_from_file(self, tmp_path):
        """Test values are read from JSON."""
        path = tmp_path / "cli.json"
        path.write_text(json.dumps({
            "parser": {"diagnostics": {"display_errors": False}},
            "encoding": "latin-1",
            "output_format": "csv",
        }))

        config = CLIConfig.from_file(path)

        assert config.parser_config.display_errors is False
        assert config.encoding == "latin-1"
        assert config.output_format == "csv"

    def test_invalid_file_falls_back(self, tmp_path, capsys):
        """Test an invalid configuration warns and keeps defaults."""
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"parser": {"output": {"preview_length": 0}}}))

        config = CLIConfig.from_file(path)

        assert config.parser_config.output.preview_length == 50
        assert "Warning: Could not load config file" in capsys.readouterr().err

    @pytest.mark.parametrize("payload", [
        [1, 2],
        "text",
        {"parser": {"extraction": 5}},
        {"parser": ["store"]},
    ])
    def test_wrongly_shaped_file_falls_back(self, tmp_path, capsys, payload):
        """Test non-object JSON at any level warns instead of crashing."""
        path = tmp_path / "shape.json"
        path.write_text(json.dumps(payload))

        config = CLIConfig.from_file(path)

        assert config.parser_config == ParserConfig()
        assert config.output_format == "text"
        assert "Warning: Could not load config file" in capsys.readouterr().err

    def test_failed_load_leaves_no_partial_values(self, tmp_path, capsys):
        """Test a file that fails late does not apply its earlier parts."""
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({
            "parser": {"diagnostics": {"display_errors": False}, "output": 3},
            "encoding": "latin-1",
        }))

        config = CLIConfig.from_file(path)

        assert config.parser_config.display_errors is True
        assert config.encoding == "utf-8"
        assert "must be a mapping" in capsys.readouterr().err

    def test_extract_with_wrongly_shaped_config(self, clean_page, tmp_path, capsys):
        """Test the extract command still runs with the default configuration."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        exit_code = main(["extract", str(clean_page), "-t", "li", "-c", str(path)])

        assert exit_code == 0
        captured = capsys.readouterr()
        assert "Warning: Could not load config file" in captured.err
        assert "  [0] Tag: li, Content: one" in captured.out

    def test_missing_file(self, tmp_path):
        """Test a missing file gives the defaults."""
        config = CLIConfig.from_file(tmp_path / "absent.json")
        assert config.output_format == "text"


class TestProcessingHelpers:
    """Tests for ExtractionProcessor and format_output."""

    def test_process_single_file(self, clean_page):
        """Test the per-file result dictionary."""
        processor = ExtractionProcessor(CLIConfig(), store_errors=True)

        result = processor.process_single_file(str(clean_page), ["li", "ul"])

        assert result["success"] is True
        assert result["record_count"] == 3
        assert result["malformed_count"] == 0
        assert result["errors"] == []
        assert "contexts" not in result

    def test_errors_separated_per_file(self, broken_page, clean_page):
        """Test stored errors of one file never leak into another."""
        processor = ExtractionProcessor(CLIConfig(), store_errors=True)

        first, second = processor.batch_process([str(broken_page), str(clean_page)], ["div"])

        assert len(first["errors"]) == 1
        assert second["errors"] == []

    def test_format_output_empty(self):
        """Test the text format with no results."""
        assert format_output([], "text", 50) == "No results to display."


class TestScanCommand:
    """Tests for the scan command."""

    def test_lists_tokens(self, tmp_path, capsys):
        """Test every recognised tag is listed with offsets."""
        path = tmp_path / "page.html"
        path.write_text("<a>x</a><!-- c -->")

        assert main(["scan", str(path)]) == 0

        assert capsys.readouterr().out.splitlines() == [
            "0-2\topen\ta\t<a>",
            "4-7\tclose\ta\t</a>",
        ]

    def test_missing_file(self, tmp_path, capsys):
        """Test scanning a missing file fails."""
        assert main(["scan", str(tmp_path / "nope.html")]) == 1
        assert "Error reading" in capsys.readouterr().err


class TestProfileCommand:
    """Tests for the profile command."""

    def test_profile_with_report(self, clean_page, tmp_path, capsys):
        """Test a session line per file and the saved report."""
        report_path = tmp_path / "report.json"

        exit_code = main(["profile", str(clean_page), "-t", "li", "--report", str(report_path)])

        assert exit_code == 0
        out = capsys.readouterr().out
        assert f"{clean_page}:" in out
        assert "2 records, 0 malformed" in out
        data = json.loads(report_path.read_text())
        assert data["summary"]["session_count"] == 1
