# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the restache CLI entry point."""

import io
import json
import sys
from pathlib import Path

import pytest

from restache.cli.main import main

# ###############
# Public Interface
# ###############


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    """Run main() with *args* and return the exit code."""
    monkeypatch.setattr(sys, "argv", ["restache", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    return exc_info.value.code


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_main_no_args_prints_help_and_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    """main() with no subcommand prints help and exits with code 0."""
    assert _run(monkeypatch) == 0


def test_version(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """--version prints the program name and version."""
    assert _run(monkeypatch, "--version") == 0
    assert capsys.readouterr().out.startswith("restache version ")


# -------- build tests --------


def test_build_single_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """build compiles a single file next to its source."""
    _write(tmp_path / "Card.stache", "<p>{title}</p>")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "Card.stache") == 0
    assert (tmp_path / "Card.jsx").read_text(encoding="utf-8") == (
        "export default function Card(props) {\n  return (\n    <p>{props.title}</p>\n  );\n}\n"
    )


def test_build_module_into_outdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Files in one directory are compiled together and may import each other."""
    _write(tmp_path / "src" / "Card.stache", "<div><avatar/></div>")
    _write(tmp_path / "src" / "Avatar.stache", '<img src="{url}">')
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "src/*.stache", "-o", "out") == 0
    card = (tmp_path / "out" / "Card.jsx").read_text(encoding="utf-8")
    assert card.startswith('import Avatar from "./Avatar.jsx";\n')
    assert (tmp_path / "out" / "Avatar.jsx").exists()


def test_build_directory_pattern_uses_extension(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """A directory argument selects the template files inside it."""
    _write(tmp_path / "ui" / "Button.stache", "<span>{label}</span>")
    _write(tmp_path / "ui" / "notes.txt", "not a template")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "ui") == 0
    assert (tmp_path / "ui" / "Button.jsx").exists()
    assert not (tmp_path / "ui" / "notes.jsx").exists()


def test_build_mirrors_directories_under_outdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Output keeps the directory layout relative to the common base directory."""
    _write(tmp_path / "a" / "First.stache", "<p>1</p>")
    _write(tmp_path / "b" / "Second.stache", "<p>2</p>")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "a/*.stache", "b/*.stache", "-o", "out") == 0
    assert (tmp_path / "out" / "a" / "First.jsx").exists()
    assert (tmp_path / "out" / "b" / "Second.jsx").exists()


def test_build_uses_config_output_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """output-directory from restache.yaml applies when -o is not given."""
    _write(tmp_path / "restache.yaml", "output-directory: gen\n")
    _write(tmp_path / "Card.stache", "<p>x</p>")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "Card.stache") == 0
    assert (tmp_path / "gen" / "Card.jsx").exists()


def test_build_with_invalid_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """An invalid config file fails the build."""
    _write(tmp_path / "custom.yaml", "parallelism: zero\n")
    _write(tmp_path / "Card.stache", "<p>x</p>")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "Card.stache", "--config", "custom.yaml") == 1
    assert "Error:" in capsys.readouterr().err


def test_build_no_match(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """A pattern that matches nothing exits with code 1."""
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "*.stache") == 1
    assert "no files matched" in capsys.readouterr().err


def test_build_cycle_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """A dependency cycle is reported as an error."""
    _write(tmp_path / "Ping.stache", "<pong/>")
    _write(tmp_path / "Pong.stache", "<ping/>")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "*.stache") == 1
    assert "cycle" in capsys.readouterr().err
    assert not (tmp_path / "Ping.jsx").exists()


def test_build_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """With no pattern, the template is read from stdin and JSX written to stdout."""
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"<span></span>")))
    assert _run(monkeypatch, "build") == 0
    assert capsys.readouterr().out == "export default function (props) {\n  return (\n    <span></span>\n  );\n}\n"


def test_build_dash_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """A single - pattern also reads stdin."""
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"<p>{x}</p>")))
    assert _run(monkeypatch, "build", "-") == 0
    assert "<p>{props.x}</p>" in capsys.readouterr().out


def test_build_stdin_decode_error(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """Undecodable stdin exits with code 1."""
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"\xff")))
    assert _run(monkeypatch, "build") == 1
    assert "failed to parse stdin" in capsys.readouterr().err


# -------- ast tests --------


def test_ast_prints_json(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """ast prints the parsed tree as a versioned JSON document."""
    path = _write(tmp_path / "Card.stache", "<p>{title}</p>")
    assert _run(monkeypatch, "ast", str(path)) == 0
    obj = json.loads(capsys.readouterr().out)
    assert obj["v"] == "1"
    assert obj["root"]["data"] == "Card"
    assert obj["root"]["children"][0]["tag"] == "p"


def test_ast_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """ast exits with code 1 for a missing file."""
    assert _run(monkeypatch, "ast", str(tmp_path / "Nope.stache")) == 1


def test_ast_writes_artifact_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """ast -o writes the tree to a file, creating parent directories."""
    path = _write(tmp_path / "Card.stache", "<p>{title}</p>")
    out = tmp_path / "trees" / "Card.json"
    assert _run(monkeypatch, "ast", str(path), "-o", str(out)) == 0
    assert json.loads(out.read_text(encoding="utf-8"))["root"]["data"] == "Card"


# -------- render tests --------


def test_render_artifact_matches_build(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """render turns a saved tree into the same JSX that build writes."""
    _write(tmp_path / "List.stache", "<ul>{#items}<li>R&D {name}</li>{/items}</ul>")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "build", "List.stache") == 0
    assert _run(monkeypatch, "ast", "List.stache", "-o", "List.json") == 0
    assert _run(monkeypatch, "render", "List.json", "-o", "out/List.jsx") == 0
    expected = (tmp_path / "List.jsx").read_text(encoding="utf-8")
    assert (tmp_path / "out" / "List.jsx").read_text(encoding="utf-8") == expected


def test_render_to_stdout(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """Without -o, render writes the JSX to stdout."""
    path = _write(tmp_path / "tree.json", '{"v": "1", "root": {"type": "component", "data": "Card"}}')
    assert _run(monkeypatch, "render", str(path)) == 0
    assert capsys.readouterr().out.startswith("export default function Card(props) {\n")


def test_render_rejects_bad_artifact(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """An artifact with an unknown format version is an error."""
    path = _write(tmp_path / "tree.json", '{"v": "0", "root": {"type": "component"}}')
    assert _run(monkeypatch, "render", str(path)) == 1
    assert "Unsupported artifact format version" in capsys.readouterr().err


def test_render_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """render exits with code 1 for a missing file."""
    assert _run(monkeypatch, "render", str(tmp_path / "missing.json")) == 1
