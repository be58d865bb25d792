"""CLI integration tests for tools/gen_format_header.py."""

from __future__ import annotations

import importlib.util
import os
from pathlib import Path
import subprocess
import sys

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
SCRIPT = REPO_ROOT / "tools" / "gen_format_header.py"

if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from protospan.descriptors import event  # noqa: E402
from protospan.render import render_definitions  # noqa: E402

OVERFLOW_TABLE = [event("WIDE", 200), event("WIDER", 100)]

HEADER_TEMPLATE = """\
#pragma once

#define W4ON2_MAX_PATTERNS 256

{block}
typedef void (*w4on2_tone_t)(void);
"""

STALE_BLOCK = """\
// -----
// protospan.js format definition
#define W4ON2_FMT_RESERVED 0xf6
// Unused values: 9
// -----
"""


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    env = dict(os.environ)
    env["PYTHONPATH"] = str(REPO_ROOT)
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        cwd=str(REPO_ROOT),
        env=env,
        text=True,
        capture_output=True,
        check=False,
    )


def _load_tool_module():
    spec = importlib.util.spec_from_file_location("gen_format_header_tool", SCRIPT)
    assert spec is not None and spec.loader is not None
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    spec.loader.exec_module(module)
    return module


def _write_header(path: Path, block: str) -> Path:
    path.write_text(HEADER_TEMPLATE.format(block=block), encoding="utf-8")
    return path


def test_cli_prints_listing_with_no_arguments() -> None:
    proc = _run_cli()

    assert proc.returncode == 0
    assert proc.stdout == render_definitions()
    assert proc.stdout.startswith("// -----\n// protospan format definition\n")
    assert "#define W4ON2_FMT_RESERVED 0xf6\n// Unused values: 10\n// -----\n" in proc.stdout
    assert proc.stderr == ""


def test_cli_output_is_identical_across_runs() -> None:
    assert _run_cli().stdout == _run_cli().stdout


def test_cli_prefix_flag() -> None:
    proc = _run_cli("--prefix", "FMT_")

    assert proc.returncode == 0
    assert "#define FMT_NOTE_ON_4_START FMT_NOTE_ON_ID\n" in proc.stdout
    assert "W4ON2_FMT_" not in proc.stdout


def test_cli_strict_accepts_shipped_table() -> None:
    proc = _run_cli("--strict")

    assert proc.returncode == 0
    assert proc.stdout == render_definitions()


def test_cli_summary_goes_to_stderr() -> None:
    proc = _run_cli("--summary")

    assert proc.returncode == 0
    assert proc.stdout == render_definitions()
    assert "0x66-0xe5" in proc.stderr
    assert "total=246 unused=10" in proc.stderr


def test_cli_writes_output_file_once(tmp_path: Path) -> None:
    out_path = tmp_path / "gen" / "fmt.h"
    proc = _run_cli("--output", str(out_path))

    assert proc.returncode == 0
    assert proc.stdout == ""
    assert "wrote" in proc.stderr
    assert out_path.read_text(encoding="utf-8") == render_definitions()

    again = _run_cli("--output", str(out_path))
    assert again.returncode == 0
    assert "unchanged" in again.stderr


def test_cli_update_rewrites_embedded_block(tmp_path: Path) -> None:
    header = _write_header(tmp_path / "w4on2.h", STALE_BLOCK)
    proc = _run_cli("--update", str(header))

    assert proc.returncode == 0
    assert header.read_text(encoding="utf-8") == HEADER_TEMPLATE.format(
        block=render_definitions()
    )


def test_cli_check_reports_stale_header(tmp_path: Path) -> None:
    header = _write_header(tmp_path / "w4on2.h", STALE_BLOCK)
    proc = _run_cli("--update", str(header), "--check")

    assert proc.returncode == 2
    assert "stale" in proc.stderr
    assert header.read_text(encoding="utf-8") == HEADER_TEMPLATE.format(block=STALE_BLOCK)


def test_cli_check_accepts_current_header(tmp_path: Path) -> None:
    header = _write_header(tmp_path / "w4on2.h", render_definitions())
    proc = _run_cli("--update", str(header), "--check")

    assert proc.returncode == 0
    assert "up to date" in proc.stderr


def test_cli_check_requires_a_target() -> None:
    proc = _run_cli("--check")

    assert proc.returncode == 2
    assert "--check needs --output or --update" in proc.stderr


def test_cli_update_without_block_fails(tmp_path: Path) -> None:
    header = tmp_path / "plain.h"
    header.write_text("#pragma once\n", encoding="utf-8")
    proc = _run_cli("--update", str(header))

    assert proc.returncode == 1
    assert "no protospan format block" in proc.stderr


def test_cli_update_missing_file_fails(tmp_path: Path) -> None:
    proc = _run_cli("--update", str(tmp_path / "missing.h"))

    assert proc.returncode == 1
    assert "not found" in proc.stderr


def test_cli_update_directory_fails_cleanly(tmp_path: Path) -> None:
    proc = _run_cli("--update", str(tmp_path))

    assert proc.returncode == 1
    assert proc.stderr.startswith("error: ")
    assert "Traceback" not in proc.stderr


def test_cli_output_directory_fails_cleanly(tmp_path: Path) -> None:
    proc = _run_cli("--output", str(tmp_path))

    assert proc.returncode == 1
    assert proc.stderr.startswith("error: ")
    assert "Traceback" not in proc.stderr


def test_main_overflow_warns_and_reports_negative_unused(capsys) -> None:
    tool = _load_tool_module()

    assert tool.main([], descriptors=OVERFLOW_TABLE) == 0

    captured = capsys.readouterr()
    assert captured.out == render_definitions(OVERFLOW_TABLE)
    assert "// Unused values: -44\n" in captured.out
    assert captured.err.startswith("warning: table needs 300 opcode values")


def test_main_strict_overflow_exits_with_error(capsys) -> None:
    tool = _load_tool_module()

    with pytest.raises(SystemExit) as excinfo:
        tool.main(["--strict"], descriptors=OVERFLOW_TABLE)

    assert str(excinfo.value.code).startswith("error: table needs 300 opcode values")
    assert "44 over" in str(excinfo.value.code)
    assert capsys.readouterr().out == ""


def test_main_uses_shipped_table_by_default(capsys) -> None:
    tool = _load_tool_module()

    assert tool.main([]) == 0
    assert capsys.readouterr().out == render_definitions()
