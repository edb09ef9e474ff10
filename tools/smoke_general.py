#!/usr/bin/env python3
"""Robust general smoke tests for compress-lab.

Goal:
- deterministic, repeatable round-trips through the real CLI for every codec
- produce a JSON report
- fail fast (non-zero exit) on any mismatch

Adds:
- --latin1 to include accented / symbol characters from the 0-255 range

Usage examples:
  python tools/smoke_general.py --iters 10
  python tools/smoke_general.py --iters 50 --seed 123 --keep
  python tools/smoke_general.py --iters 10 --latin1
"""

from __future__ import annotations

import argparse
import json
import random
import shutil
import string
import subprocess
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any

CODECS = ("rle", "huffman", "lzw")


def _run(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(
        cmd,
        text=True,
        capture_output=True,
    )


def _write_text(p: Path, s: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    # newline="" keeps "\r" and "\n" exactly as generated
    with p.open("w", encoding="utf-8", newline="") as f:
        f.write(s)


def _gen_runs(rng: random.Random, *, latin1: bool) -> str:
    # digits are excluded: RLE cannot tell a digit symbol from a count
    alphabet = string.ascii_uppercase[:6] + " #."
    if latin1:
        alphabet += "éàüß±"
    parts: list[str] = []
    for _ in range(rng.randint(1, 20)):
        parts.append(rng.choice(alphabet) * rng.randint(1, 30))
    return "".join(parts)


def _gen_prose(rng: random.Random, *, latin1: bool) -> str:
    words = ["mississippi", "banana", "abracadabra", "tobeornottobe", "lorem", "ipsum", "the", "and"]
    if latin1:
        words += ["café", "naïve", "façade", "£"]
    return " ".join(rng.choice(words) for _ in range(rng.randint(1, 60)))


@dataclass
class StepResult:
    name: str
    ok: bool
    rc: int
    stdout: str
    stderr: str


def main() -> int:
    ap = argparse.ArgumentParser(description="compress-lab robust general smoke tests (CLI round-trips)")
    ap.add_argument("--iters", type=int, default=10, help="Number of iterations (default: 10)")
    ap.add_argument("--seed", type=int, default=12345, help="Deterministic RNG seed (default: 12345)")
    ap.add_argument("--latin1", action="store_true", help="Include non-ASCII characters from the 0-255 range")
    ap.add_argument("--keep", action="store_true", help="Keep temp workdir on exit")
    ap.add_argument("--workdir", type=Path, default=None, help="Optional workdir (default: temp)")
    ap.add_argument("--json-out", type=Path, default=None, help="Write JSON report to file")
    ap.add_argument("--python", dest="pyexe", default=sys.executable, help="Python executable to use")
    ns = ap.parse_args()

    rng = random.Random(ns.seed)

    if ns.workdir:
        wd = ns.workdir.resolve()
        wd.mkdir(parents=True, exist_ok=True)
        own_temp = False
    else:
        wd = Path(tempfile.mkdtemp(prefix="compress-lab-smoke-"))
        own_temp = True

    report: dict[str, Any] = {
        "ok": True,
        "seed": ns.seed,
        "iters": ns.iters,
        "latin1": bool(ns.latin1),
        "workdir": str(wd),
        "steps": [],
    }

    def add_step(name: str, res: subprocess.CompletedProcess[str], *, expect_rc: int = 0) -> bool:
        ok = res.returncode == expect_rc
        step = StepResult(name=name, ok=ok, rc=res.returncode, stdout=res.stdout, stderr=res.stderr)
        report["steps"].append(step.__dict__)
        if not ok:
            report["ok"] = False
        return ok

    def add_failure(name: str, message: str) -> None:
        report["ok"] = False
        report["steps"].append({"name": name, "ok": False, "rc": 1, "stdout": "", "stderr": message})

    def run_cli(*args: str) -> subprocess.CompletedProcess[str]:
        cmd = [ns.pyexe, "-m", "compress_lab.cli", *args]
        return _run(cmd)

    try:
        add_step("cli_version", run_cli("--version"))
        add_step("cli_help", run_cli("--help"))
        add_step("cli_describe", run_cli("describe"))

        run_spec = json.dumps(
            {"spec": "compress-lab.run.v1", "name": "smoke-general", "codec": "lzw", "baselines": ["zlib"]},
            separators=(",", ":"),
        )
        add_step("config_validate", run_cli("config-validate", run_spec))

        for it in range(ns.iters):
            it_dir = wd / f"iter_{it:03d}"
            samples = {
                "runs": _gen_runs(rng, latin1=bool(ns.latin1)),
                "prose": _gen_prose(rng, latin1=bool(ns.latin1)),
            }
            for kind, text in samples.items():
                src = it_dir / f"{kind}.txt"
                _write_text(src, text)

                for codec in CODECS:
                    name = f"it{it:03d}_{kind}_{codec}"
                    enc = run_cli("encode", "@" + str(src), "--codec", codec, "--json")
                    if not add_step(f"{name}_encode", enc):
                        continue
                    res = json.loads(enc.stdout)

                    data_path = it_dir / f"{kind}.{codec}.enc"
                    _write_text(data_path, res["encoded"])
                    dec_args = ["decode", "@" + str(data_path), "--codec", codec, "--json"]
                    if codec == "huffman":
                        table_path = it_dir / f"{kind}.table.json"
                        _write_text(table_path, json.dumps(res["code_table"], ensure_ascii=False))
                        dec_args += ["--table", "@" + str(table_path)]
                    dec = run_cli(*dec_args)
                    if not add_step(f"{name}_decode", dec):
                        continue
                    back = json.loads(dec.stdout)["decoded"]
                    if back != text:
                        add_failure(f"{name}_diff", "roundtrip mismatch (text differs)")

                add_step(f"it{it:03d}_{kind}_compare", run_cli("compare", "@" + str(src), "--config", run_spec))

            # error paths keep their exit codes
            add_step(
                f"it{it:03d}_huffman_without_table_expect_12",
                run_cli("decode", "0101", "--codec", "huffman"),
                expect_rc=12,
            )
            add_step(
                f"it{it:03d}_lzw_bad_code_expect_15",
                run_cli("decode", f"65,{300 + it}", "--codec", "lzw"),
                expect_rc=15,
            )

        if ns.json_out:
            ns.json_out.parent.mkdir(parents=True, exist_ok=True)
            ns.json_out.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding="utf-8")

        print(
            json.dumps(
                {
                    "ok": report["ok"],
                    "seed": ns.seed,
                    "iters": ns.iters,
                    "latin1": bool(ns.latin1),
                    "workdir": str(wd),
                },
                ensure_ascii=False,
            )
        )
        return 0 if report["ok"] else 1

    finally:
        if own_temp and not ns.keep:
            shutil.rmtree(wd, ignore_errors=True)


if __name__ == "__main__":
    raise SystemExit(main())
