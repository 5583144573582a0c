import json

import pytest

from conftest import global_scope, udt
from pdb_dumper import dump_pdb
from pdb_dumper.debug_symbols import LoadError, SymTag


class FakeSession:
    def __init__(self, scope):
        self.global_scope = scope
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "pdb-dumper-config.json").write_text(json.dumps({"show_progress": False}))
    return tmp_path


class TestMain:
    def test_missing_path_prints_usage(self, workdir, capsys):
        assert dump_pdb.main([]) == 1
        assert "Usage" in capsys.readouterr().err

    def test_load_error_exits_with_one(self, workdir, monkeypatch, capsys):
        def fail(path, dia_dll):
            raise LoadError("loadDataFromPdb failed")

        monkeypatch.setattr(dump_pdb, "open_pdb", fail)
        assert dump_pdb.main(["missing.pdb"]) == 1
        assert "loadDataFromPdb failed" in capsys.readouterr().err
        assert not (workdir / "pdb_dump.json").exists()

    def test_top_level_enumeration_failure_exits_with_one(self, workdir, monkeypatch, point_scope):
        point_scope.failing_tags = [SymTag.NULL]
        monkeypatch.setattr(dump_pdb, "open_pdb", lambda path, dia_dll: FakeSession(point_scope))
        assert dump_pdb.main(["game.pdb"]) == 1

    def test_dump_written_with_prefix_from_command_line(self, workdir, monkeypatch, point_scope, capsys):
        session = FakeSession(point_scope)
        monkeypatch.setattr(dump_pdb, "open_pdb", lambda path, dia_dll: session)

        assert dump_pdb.main(["game.pdb", "engine/"]) == 0

        data = json.loads((workdir / "pdb_dump.json").read_text(encoding="utf-8"))
        assert data["Classes"] == []
        assert [f["Name"] for f in data["GlobalFunctions"]] == ["Main"]
        assert "pdb_dump.json" in capsys.readouterr().out
        assert session.closed

    def test_prefix_falls_back_to_config(self, workdir, monkeypatch, point_scope):
        (workdir / "pdb-dumper-config.json").write_text(json.dumps({
            "show_progress": False,
            "source_file_prefix": "src/",
            "output_file": "out/dump.json"
        }))
        monkeypatch.setattr(dump_pdb, "open_pdb", lambda path, dia_dll: FakeSession(point_scope))

        assert dump_pdb.main(["game.pdb"]) == 0

        data = json.loads((workdir / "out" / "dump.json").read_text(encoding="utf-8"))
        assert [c["Name"] for c in data["Classes"]] == ["Point"]

    def test_unencodable_name_does_not_abort_the_dump(self, workdir, monkeypatch):
        scope = global_scope(udt("Good"), udt("Bad\udc80"))
        monkeypatch.setattr(dump_pdb, "open_pdb", lambda path, dia_dll: FakeSession(scope))

        assert dump_pdb.main(["x.pdb"]) == 0

        data = json.loads((workdir / "pdb_dump.json").read_text(encoding="utf-8"))
        assert [c["Name"] for c in data["Classes"]] == ["Good", "Bad?"]
        assert not (workdir / "pdb_dump.json.tmp").exists()


class TestProgressReporter:
    def test_reports_only_when_percentage_changes(self, monkeypatch, capsys):
        reporter = dump_pdb.ProgressReporter()
        reporter.is_terminal = True
        monkeypatch.setattr(dump_pdb, "_set_console_title", lambda title: None)

        for processed in range(1, 10001):
            reporter(processed, 10000)
        reporter.finish()

        err = capsys.readouterr().err
        # one line per 0.1% step, not one per symbol
        assert 990 <= err.count("Progress:") <= 1001
        assert "(100.0%)" in err

    def test_redirected_output_is_throttled(self, monkeypatch, capsys):
        reporter = dump_pdb.ProgressReporter()
        reporter.is_terminal = False
        monkeypatch.setattr(dump_pdb, "_set_console_title", lambda title: None)
        monkeypatch.setattr(dump_pdb.time, "time", lambda: 1000.0)

        for processed in range(1, 10001):
            reporter(processed, 10000)
        reporter.finish()

        lines = capsys.readouterr().err.splitlines()
        assert lines == [
            "Progress: 1/10000 symbols (0.0%)",
            "Progress: 10000/10000 symbols (100.0%)",
        ]

    def test_ignores_empty_scope(self, capsys):
        dump_pdb.ProgressReporter()(0, 0)
        assert capsys.readouterr().err == ""
