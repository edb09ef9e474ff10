from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

from compress_lab.errors import (
    EXIT_AUXILIARY_PARSE,
    EXIT_FORMAT,
    EXIT_INVALID_CODE,
    EXIT_MISSING_AUXILIARY,
    EXIT_USAGE,
)
from compress_lab.lab_spec import SPEC_ID_V1


def _run_cli(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run compress-lab CLI through a python -c wrapper.

    This avoids assuming the console-script entrypoint is installed.
    """
    cmd = [
        sys.executable,
        "-c",
        "from compress_lab.cli import main; raise SystemExit(main())",
        *args,
    ]
    src = str(Path(__file__).resolve().parents[1] / "src")
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src, env.get("PYTHONPATH", "")) if p)
    return subprocess.run(
        cmd,
        env=env,
        cwd=str(cwd) if cwd else None,
        text=True,
        capture_output=True,
        encoding="utf-8",
    )


def test_cli_encode_rle_human() -> None:
    r = _run_cli("encode", "AAAAABBBCCCCC")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "=== rle encode ===" in r.stdout
    assert "A5B3C5" in r.stdout
    assert "6 chars / 13 chars" in r.stdout


def test_cli_encode_json_with_trace() -> None:
    r = _run_cli("encode", "AAAA", "--codec", "lzw", "--trace", "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout)
    assert obj["codec"] == "lzw"
    assert obj["encoded"] == "65,256,65"
    assert [s["kind"] for s in obj["steps"]] == ["hit", "emit", "hit", "emit", "flush"]


def test_cli_huffman_roundtrip_with_table_file(tmp_path: Path) -> None:
    r = _run_cli("encode", "abracadabra", "--codec", "huffman", "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout)

    table = tmp_path / "table.json"
    table.write_text(json.dumps(obj["code_table"]), encoding="utf-8")

    r = _run_cli("decode", obj["encoded"], "--codec", "huffman", "--table", "@" + str(table))
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert r.stdout.rstrip("\n") == "abracadabra"


def test_cli_decode_errors_map_to_exit_codes() -> None:
    r = _run_cli("decode", "0101", "--codec", "huffman")
    assert r.returncode == EXIT_MISSING_AUXILIARY
    assert r.stderr.startswith("[compress-lab]")

    r = _run_cli("decode", "0101", "--codec", "huffman", "--table", "{bad")
    assert r.returncode == EXIT_AUXILIARY_PARSE

    r = _run_cli("decode", "65,x", "--codec", "lzw")
    assert r.returncode == EXIT_FORMAT

    r = _run_cli("decode", "65,999", "--codec", "lzw")
    assert r.returncode == EXIT_INVALID_CODE


def test_cli_unknown_codec_is_usage_error() -> None:
    r = _run_cli("encode", "abc", "--codec", "arith")
    assert r.returncode == EXIT_USAGE
    assert "unknown codec" in r.stderr


def test_cli_roundtrip_all_codecs() -> None:
    for cid in ("rle", "huffman", "lzw"):
        r = _run_cli("roundtrip", "TOBEORNOTTOBEORTOBEORNOT", "--codec", cid)
        assert r.returncode == 0, (cid, r.stdout, r.stderr)
        assert r.stdout.strip() == "OK"


def test_cli_roundtrip_reads_file(tmp_path: Path) -> None:
    inp = tmp_path / "in.txt"
    inp.write_text("hello hello hello\n", encoding="utf-8")
    r = _run_cli("roundtrip", "@" + str(inp), "--codec", "lzw")
    assert r.returncode == 0, (r.stdout, r.stderr)

    r = _run_cli("roundtrip", "@" + str(tmp_path / "missing.txt"))
    assert r.returncode == EXIT_USAGE


def test_cli_config_picks_codec_and_cli_overrides(tmp_path: Path) -> None:
    cfg = tmp_path / "run.json"
    cfg.write_text(json.dumps({"spec": SPEC_ID_V1, "codec": "lzw", "lzw_code_bits": 9}), encoding="utf-8")

    r = _run_cli("encode", "AAAA", "--config", "@" + str(cfg), "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout)
    assert obj["codec"] == "lzw"
    assert obj["encoded_length"] == 27

    r = _run_cli("encode", "AAAA", "--config", "@" + str(cfg), "--codec", "rle", "--json")
    assert json.loads(r.stdout)["codec"] == "rle"


def test_cli_config_validate() -> None:
    r = _run_cli("config-validate", json.dumps({"spec": SPEC_ID_V1, "codec": "huffman"}))
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert "OK" in r.stdout

    r = _run_cli("config-validate", json.dumps({"spec": SPEC_ID_V1, "wat": 1}))
    assert r.returncode == EXIT_USAGE


def test_cli_compare_json() -> None:
    r = _run_cli("compare", "AAAAABBBCCCCC", "--baseline", "zlib", "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout)
    keys = [row["key"] for row in obj["rows"]]
    assert keys == ["original", "rle", "huffman", "lzw", "zlib"]
    assert obj["best"] == "huffman"


def test_cli_image_blank() -> None:
    r = _run_cli("image", *(["00000000"] * 8), "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    obj = json.loads(r.stdout)
    assert obj["encoded"] == "064"
    assert obj["compressed_bits"] == 12

    r = _run_cli("image", "0101")
    assert r.returncode == EXIT_USAGE


def test_cli_describe() -> None:
    r = _run_cli("describe")
    assert r.returncode == 0, (r.stdout, r.stderr)
    for cid in ("rle", "huffman", "lzw"):
        assert f"[{cid}]" in r.stdout

    r = _run_cli("describe", "lzw")
    assert "[lzw]" in r.stdout
    assert "[rle]" not in r.stdout


def test_cli_image_preset() -> None:
    r = _run_cli("image", "--preset", "split", "--json")
    assert r.returncode == 0, (r.stdout, r.stderr)
    assert json.loads(r.stdout)["encoded"] == "032132"

    r = _run_cli("image", "--preset", "checker", *(["00000000"] * 8))
    assert r.returncode == EXIT_USAGE


def test_cli_lzw_outside_seed_range_is_format_error() -> None:
    r = _run_cli("encode", "日本", "--codec", "lzw")
    assert r.returncode == EXIT_FORMAT
    assert "seed range" in r.stderr
