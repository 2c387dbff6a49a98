from pathlib import Path

import pytest

from t4c.cli import main

from tests.infrastructure import jload, run_cli, write_config, write_template


class TestCompileCommand:

    def test_ok_report(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "page.tt", "Hi <#= name #>!")

        rc = main(["compile", str(tpl)])
        out = capsys.readouterr().out
        data = jload(out)

        assert rc == 0
        assert data["ok"] is True
        assert data["formatVersion"] == 1
        assert data["template"] == str(tpl)
        assert [i["op"] for i in data["instructions"]] == ["literal", "expression", "literal"]
        expr = data["instructions"][1]
        assert expr["code"] == "name"
        assert expr["escape"] == "auto"
        assert expr["span"] == {"start": 3, "end": 14, "line": 1, "column": 4}

    def test_error_report(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "bad.tt", "ok\n<#= missing")

        rc = main(["compile", str(tpl)])
        captured = capsys.readouterr()
        data = jload(captured.out)

        assert rc == 2
        assert data["ok"] is False
        assert data["instructions"] == []
        assert data["error"]["kind"] == "UnterminatedDelimiter"
        assert data["error"]["span"]["line"] == 2
        assert f"{tpl}:2:1: error: Unterminated delimiter" in captured.err

    def test_debug_flag(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "page.tt", "x")

        main(["compile", str(tpl), "--debug"])

        assert jload(capsys.readouterr().out)["debug"] is True

    def test_pretty_output(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "page.tt", "x")

        main(["compile", str(tpl), "--pretty"])
        out = capsys.readouterr().out

        assert '\n  "ok": true' in out
        assert jload(out)["ok"] is True

    def test_config_next_to_template(self, tmp_path: Path, capsys):
        write_config(tmp_path, "autoescape: false\n")
        tpl = write_template(tmp_path, "page.tt", "<#= v #>")

        main(["compile", str(tpl)])

        assert jload(capsys.readouterr().out)["instructions"][0]["escape"] == "raw"

    def test_explicit_config(self, tmp_path: Path, capsys):
        cfg = write_config(tmp_path / "cfg", "sink: buf\n")
        tpl = write_template(tmp_path, "page.tt", "x")

        main(["compile", str(tpl), "--config", str(cfg)])

        assert jload(capsys.readouterr().out)["sink"] == "buf"

    def test_bad_config(self, tmp_path: Path, capsys):
        write_config(tmp_path, "unknown: 1\n")
        tpl = write_template(tmp_path, "page.tt", "x")

        rc = main(["compile", str(tpl)])

        assert rc == 2
        assert "unexpected keys" in capsys.readouterr().err

    def test_missing_template(self, tmp_path: Path, capsys):
        rc = main(["compile", str(tmp_path / "nope.tt")])

        assert rc == 2
        assert "Template not found" in capsys.readouterr().err


class TestCheckCommand:

    def test_mixed_results(self, tmp_path: Path, capsys):
        good = write_template(tmp_path, "good.tt", "<# if a #>x<# endif #>")
        bad = write_template(tmp_path, "bad.tt", "<# if a #>x")

        rc = main(["check", str(good), str(bad)])
        captured = capsys.readouterr()

        assert rc == 2
        assert f"{good}: ok" in captured.out
        assert str(bad) not in captured.out
        assert "Unclosed block 'if a'" in captured.err

    def test_missing_template_does_not_stop_check(self, tmp_path: Path, capsys):
        good = write_template(tmp_path, "good.tt", "x")

        rc = main(["check", str(tmp_path / "missing.tt"), str(good)])
        captured = capsys.readouterr()

        assert rc == 2
        assert f"{good}: ok" in captured.out
        assert "Template not found" in captured.err

    def test_all_ok(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "good.tt", "plain")

        assert main(["check", str(tpl)]) == 0


class TestDumpCommand:

    def test_parts(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "page.tt", "Hi <#= name #>!<# escape off #>")

        rc = main(["dump", str(tpl)])
        lines = capsys.readouterr().out.splitlines()

        assert rc == 0
        assert lines == [
            "1:1 Text:'Hi '",
            "1:4 Expr[auto]:name",
            "1:15 Text:'!'",
            "1:16 Dir:escape off",
        ]

    def test_listing(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "page.tt", "<# for x in xs #><#= x #><# end #>")

        main(["dump", str(tpl), "--listing"])
        lines = capsys.readouterr().out.splitlines()

        assert lines[0] == f"for x in xs  # {tpl}:1:1"
        assert lines[1] == f"_out.write_escaped(x)  # {tpl}:1:18"
        assert lines[2].startswith("end  # ")

    def test_dump_error(self, tmp_path: Path, capsys):
        tpl = write_template(tmp_path, "page.tt", "<#@ include x #>")

        rc = main(["dump", str(tpl)])

        assert rc == 2
        assert "Unknown directive 'include'" in capsys.readouterr().err


class TestEntry:

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])

        assert exc.value.code == 0
        assert capsys.readouterr().out.startswith("t4c ")

    def test_subprocess(self, tmp_path: Path):
        write_template(tmp_path, "page.tt", "<#= v #>")

        cp = run_cli(tmp_path, "compile", "page.tt")

        assert cp.returncode == 0, cp.stderr
        assert jload(cp.stdout)["instructions"][0]["op"] == "expression"
