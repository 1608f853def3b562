"""
CLI tests for python -m goinstrument.

Tests only:
  - Happy path (output file, in-place rewrite)
  - Error paths (missing file, wrong extension, syntax error)
"""
from fakes import ROOT  # noqa: F401
from goinstrument.__main__ import main

SOURCE = "package svc\n\nimport \"context\"\n\nfunc Do(ctx context.Context) {\n\twork()\n}\n"


class TestCLI:

    def test_writes_output_file(self, tmp_path, capsys):
        src = tmp_path / "svc.go"
        src.write_text(SOURCE)
        out = tmp_path / "out.go"

        rc = main([str(src), "-o", str(out), "--app", "billing"])

        assert rc == 0
        assert 'otel.Tracer("billing").Start(ctx, "svc.Do")' in out.read_text()
        assert src.read_text() == SOURCE
        assert "Instrumented 1 functions" in capsys.readouterr().out

    def test_default_output_name(self, tmp_path, monkeypatch):
        src = tmp_path / "svc.go"
        src.write_text(SOURCE)
        monkeypatch.chdir(tmp_path)

        assert main([str(src)]) == 0
        assert (tmp_path / "instrumented_svc.go").exists()

    def test_write_in_place(self, tmp_path):
        src = tmp_path / "svc.go"
        src.write_text(SOURCE)

        assert main([str(src), "-w"]) == 0
        assert "defer span.End()" in src.read_text()

    def test_exclude_flag(self, tmp_path):
        src = tmp_path / "svc.go"
        src.write_text(SOURCE)

        assert main([str(src), "-w", "--exclude", "^Do$"]) == 0
        assert src.read_text() == SOURCE

    def test_nonexistent_path_returns_error(self, tmp_path, capsys):
        rc = main([str(tmp_path / "missing.go")])
        assert rc == 1
        assert "not found" in capsys.readouterr().err

    def test_wrong_extension(self, tmp_path, capsys):
        src = tmp_path / "svc.txt"
        src.write_text(SOURCE)
        assert main([str(src)]) == 1
        assert "unsupported extension" in capsys.readouterr().err

    def test_syntax_error(self, tmp_path, capsys):
        src = tmp_path / "bad.go"
        src.write_text("package svc\n\nfunc (\n")
        assert main([str(src), "-w"]) == 1
        assert "syntax error" in capsys.readouterr().err
        assert src.read_text() == "package svc\n\nfunc (\n"
