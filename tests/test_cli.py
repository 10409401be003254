"""Tests for the packagedetails command line."""

import logging
import os
from unittest.mock import patch

import pytest

from packagedetails.args import parse_args
from packagedetails.cli import main
from packagedetails.errors import FetchError
from packagedetails.storage import read_index


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _run(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


def _corpus(tmp_path, *relative):
    root = tmp_path / "authors" / "id"
    for rel in relative:
        target = root.joinpath(*rel.split("/"))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(b"")
    return str(root)


ENTRIES = [
    "-e", "Foo", "1.23", "F/FO/FOO/Foo-1.23.tgz",
    "-e", "Bar", "2.34", "B/BA/BAR/Bar-2.34.tgz",
]


class TestParseArgs:
    """Argument parsing."""

    def test_build_arguments(self):
        args = parse_args(["build", "out.txt.gz", "-e", "Foo", "1.0", "F/Foo-1.0.tgz", "--multiple-versions"])
        assert args.action == "build"
        assert args.OUTPUT == "out.txt.gz"
        assert args.ENTRIES == [["Foo", "1.0", "F/Foo-1.0.tgz"]]
        assert args.MULTIPLE_VERSIONS is True
        assert args.LOG_LEVEL == "INFO"

    def test_check_arguments(self):
        args = parse_args(["check", "index.txt", "--corpus", "/cpan/authors/id", "--loglevel", "DEBUG"])
        assert args.INDEX == "index.txt"
        assert args.CORPUS == "/cpan/authors/id"
        assert args.LOG_LEVEL == "DEBUG"

    def test_subcommand_is_required(self):
        with pytest.raises(SystemExit):
            parse_args([])


class TestBuildAndCheck:
    """Writing an index and validating it."""

    def test_build_then_check_against_corpus(self, tmp_path, capsys):
        output = str(tmp_path / "02packages.details.txt.gz")
        corpus = _corpus(tmp_path, "F/FO/FOO/Foo-1.23.tgz", "F/FO/FOO/Foo-1.22.tgz", "B/BA/BAR/Bar-2.34.tgz")

        assert _run(["build", output] + ENTRIES) == 0
        assert f"Wrote 2 records to {output}" in capsys.readouterr().out
        assert read_index(output).count() == 2

        assert _run(["check", output, "--corpus", corpus]) == 0
        assert f"{output}: OK (2 records)" in capsys.readouterr().out

    def test_check_reports_missing_archives(self, tmp_path, capsys):
        output = str(tmp_path / "02packages.details.txt")
        corpus = _corpus(tmp_path, "F/FO/FOO/Foo-1.23.tgz")
        _run(["build", output] + ENTRIES)
        capsys.readouterr()

        assert _run(["check", output, "-c", corpus]) == 3

        out = capsys.readouterr().out
        assert "MissingArchivesError" in out
        assert os.path.join("B", "BA", "BAR", "Bar-2.34.tgz") in out

    def test_check_reports_count_mismatch(self, tmp_path, capsys):
        index_file = tmp_path / "02packages.details.txt"
        index_file.write_text(
            "Columns: package name, version, path\nLine-Count: 5\n\nFoo 1.0 F/Foo-1.0.tgz\n",
            encoding="utf-8",
        )

        assert _run(["check", str(index_file)]) == 3
        assert "CountMismatchError" in capsys.readouterr().out

    def test_duplicate_entry_fails_without_multiple_versions(self, tmp_path):
        output = str(tmp_path / "index.txt")
        argv = ["build", output, "-e", "Foo", "1.0", "a.tgz", "-e", "Foo", "2.0", "b.tgz"]
        assert _run(argv) == 1
        assert not os.path.exists(output)

    def test_multiple_versions_keeps_highest(self, tmp_path):
        output = str(tmp_path / "index.txt")
        argv = ["build", output, "-e", "Foo", "1.0", "a.tgz", "-e", "Foo", "2.0", "b.tgz", "--multiple-versions"]
        assert _run(argv) == 0
        (record,) = read_index(output).as_unique_sorted_list()
        assert record.path == "b.tgz"

    def test_build_uses_config_file(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("header:\n  description: Configured\n", encoding="utf-8")
        output = str(tmp_path / "index.txt")

        assert _run(["build", output, "--config", str(config)] + ENTRIES) == 0
        assert read_index(output).get_header("description") == "Configured"


class TestOtherCommands:
    """show, reduce and error exits."""

    def test_show(self, tmp_path, capsys):
        output = str(tmp_path / "index.txt")
        _run(["build", output] + ENTRIES)
        capsys.readouterr()

        assert _run(["show", output]) == 0

        out = capsys.readouterr().out
        assert "File: 02packages.details.txt" in out
        assert "Line-Count: 2" in out
        assert "Records: 2" in out
        assert "Warnings: 0" in out

    def test_reduce(self, tmp_path, capsys):
        corpus = _corpus(tmp_path, "F/FO/FOO/Foo-1.9.tgz", "F/FO/FOO/Foo-1.10.tgz", "B/BA/BAR/Bar-2.34.tgz")

        assert _run(["reduce", corpus]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            os.path.join(corpus, "B", "BA", "BAR", "Bar-2.34.tgz"),
            os.path.join(corpus, "F", "FO", "FOO", "Foo-1.9.tgz"),
        ]

    def test_missing_index_file(self, tmp_path):
        assert _run(["show", str(tmp_path / "absent.txt")]) == 1

    def test_fetch_failure(self):
        with patch("packagedetails.cli.load_index", side_effect=FetchError("unreachable")):
            assert _run(["show", "https://cpan.example.com/02packages.details.txt"]) == 2

    def test_logfile(self, tmp_path):
        output = str(tmp_path / "index.txt")
        log_file = tmp_path / "run.log"

        assert _run(["build", output, "--logfile", str(log_file)] + ENTRIES) == 0

        assert "Added entries" in log_file.read_text(encoding="utf-8")

    def test_decode_warnings_reported_once(self, tmp_path, capsys):
        index_file = tmp_path / "02packages.details.txt"
        index_file.write_text(
            "Columns: package name, version, path\nno delimiter here\n\nFoo 1.0 F/Foo-1.0.tgz\n",
            encoding="utf-8",
        )

        assert _run(["show", str(index_file)]) == 0

        captured = capsys.readouterr()
        assert "Warnings: 1" in captured.out
        assert captured.err.count("header line has no field name") == 1
