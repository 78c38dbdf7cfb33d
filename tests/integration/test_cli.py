from __future__ import annotations

import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from tagjump.cli import app

runner = CliRunner()


def _config(tmp_path: Path, **generator) -> str:
    path = tmp_path / "tagjump.yaml"
    path.write_text(
        yaml.safe_dump({"workspace": {"root": str(tmp_path)}, "generator": generator}),
        encoding="utf-8",
    )
    return str(path)


def test_lookup_prints_one_based_lines(workspace, make_tags) -> None:
    (workspace / ".vscode-ctags").write_text(make_tags("bar\ta.c\t3", "bar\tb.c\t10"))
    result = runner.invoke(app, ["lookup", "bar", "--root", str(workspace)])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [f"{workspace / 'a.c'}:3", f"{workspace / 'b.c'}:10"]


def test_lookup_json(workspace, make_tags) -> None:
    (workspace / ".vscode-ctags").write_text(make_tags("foo\tfoo.c\t/^int foo()/"))
    result = runner.invoke(app, ["lookup", "foo", "--root", str(workspace), "--json"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == [{"path": str(workspace / "foo.c"), "lineno": 0}]


def test_lookup_no_matches(workspace, make_tags) -> None:
    (workspace / ".vscode-ctags").write_text(make_tags("foo\tfoo.c\t1"))
    result = runner.invoke(app, ["lookup", "nothing", "--root", str(workspace)])
    assert result.exit_code == 1
    assert "has no matches" in result.output


def test_reindex_without_tags_file_fails(workspace) -> None:
    result = runner.invoke(app, ["reindex", "--root", str(workspace)])
    assert result.exit_code == 1


def test_regenerate_with_fake_ctags(tmp_path, workspace, fake_ctags) -> None:
    config = _config(tmp_path, binary=fake_ctags[0], extra_args=fake_ctags[1:])
    result = runner.invoke(app, ["regenerate", "--config", config, "-l", "C", "-e", "build"])
    assert result.exit_code == 0, result.output
    assert "Generating CTags index (--languages=C --exclude=build)" in result.output
    assert "symbols=1 records=1" in result.output

    lookup = runner.invoke(app, ["lookup", "foo", "--config", config])
    assert lookup.output.strip() == f"{workspace / 'foo.c'}:1"


def test_regenerate_failure_exit_code(tmp_path, fake_ctags) -> None:
    config = _config(tmp_path, binary=fake_ctags[0], extra_args=[*fake_ctags[1:], "--fail"])
    result = runner.invoke(app, ["regenerate", "--config", config])
    assert result.exit_code == 1
