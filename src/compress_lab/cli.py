"""compress-lab CLI.

This is the stable CLI entrypoint (console-script: ``compress-lab``).

UX policy:
  - TEXT / DATA arguments accept '@file' to read UTF-8 text from a file.
  - --codec on the command line wins over the run spec (--config), which
    wins over the default (rle).
  - Results go to stdout; diagnostics go to stderr prefixed with [compress-lab].
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from compress_lab.errors import EXIT_GENERIC, EXIT_USAGE, CompressLabError, UsageError
from compress_lab.lab_spec import LabSpecError, LabSpecV1, load_lab_spec

TAG = "[compress-lab]"


def _pkg_version() -> str:
    try:
        from importlib.metadata import PackageNotFoundError, version

        try:
            return version("compress-lab")
        except PackageNotFoundError:
            # script invoked from source, metadata missing
            return "0+unknown"
    except Exception:
        return "0+unknown"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _add_codec_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--codec",
        default=None,
        help="Codec id: rle, huffman, lzw (default: --config codec or rle)",
    )
    p.add_argument(
        "--config",
        default=None,
        help="Run spec JSON (v1). Use '@file.json' to load from file, or pass JSON inline.",
    )


def _read_arg(value: str) -> str:
    """Literal text, or the content of a file when written as '@path'."""
    if value.startswith("@") and len(value) > 1:
        p = Path(value[1:]).expanduser()
        if not p.is_file():
            raise UsageError(f"file not found: {p}")
        return p.read_text(encoding="utf-8")
    return value


def _resolve_spec(config_arg: str | None) -> LabSpecV1:
    return load_lab_spec(config_arg) if config_arg else LabSpecV1()


def _resolve_codec(codec_arg: str | None, spec: LabSpecV1) -> str:
    return codec_arg if codec_arg is not None else spec.codec


def _print_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, separators=(",", ":")))


def _print_steps(steps) -> None:
    for i, s in enumerate(steps):
        print(f"  [{i:>3}] {s.kind:<6} {s.description}")


def _cmd_encode(text_arg: str, *, codec_arg: str | None, config_arg: str | None, trace: bool, as_json: bool) -> int:
    from compress_lab.registry import get_codec

    spec = _resolve_spec(config_arg)
    codec = get_codec(_resolve_codec(codec_arg, spec), lzw_code_bits=spec.lzw_code_bits)
    text = _read_arg(text_arg)
    show_steps = trace or spec.trace

    res = codec.try_encode(text).unwrap()
    if as_json:
        _print_json(res.to_dict(with_steps=show_steps))
        return 0

    print(f"=== {codec.codec_id} encode ===")
    print(f"Encoded        : {res.encoded}")
    print(f"Size           : {res.encoded_length} {res.unit} / {res.original_length} {res.unit}")
    print(f"Ratio          : {res.ratio:.2f}%")
    if res.code_table is not None:
        print(f"Code table     : {res.serialized_table()}")
        freq = ", ".join(f"{sym!r}:{n}" for sym, n in res.freq_table or ())
        print(f"Frequencies    : {freq}")
    if show_steps:
        print(f"Steps          : {len(res.steps)}")
        _print_steps(res.steps)
    return 0


def _cmd_decode(data_arg: str, *, codec_arg: str | None, config_arg: str | None, table_arg: str | None, as_json: bool) -> int:
    from compress_lab.registry import get_codec

    spec = _resolve_spec(config_arg)
    codec = get_codec(_resolve_codec(codec_arg, spec), lzw_code_bits=spec.lzw_code_bits)
    # no strip(): an RLE stream may begin or end with a run of spaces
    data = _read_arg(data_arg)
    table = _read_arg(table_arg) if table_arg is not None else None

    text = codec.decode(data, table).unwrap()
    if as_json:
        _print_json({"codec": codec.codec_id, "decoded": text})
        return 0
    print(text)
    return 0


def _cmd_roundtrip(text_arg: str, *, codec_arg: str | None, config_arg: str | None) -> int:
    from compress_lab.session import LabSession

    spec = _resolve_spec(config_arg)
    sess = LabSession(codec_id=_resolve_codec(codec_arg, spec), lzw_code_bits=spec.lzw_code_bits)
    out = sess.compress(text=_read_arg(text_arg))
    if out is None:
        raise UsageError("roundtrip: empty input")
    out.unwrap()
    sess.decompress().unwrap()
    if not sess.roundtrip_ok():
        print(f"{TAG} roundtrip mismatch ({sess.codec_id})", file=sys.stderr)
        return EXIT_GENERIC
    print("OK")
    return 0


def _cmd_compare(text_arg: str, *, baselines: list[str] | None, config_arg: str | None, as_json: bool) -> int:
    from compress_lab.compare import compare_all, render_table

    spec = _resolve_spec(config_arg)
    # precedence: CLI --baseline > spec.baselines
    chosen = tuple(baselines) if baselines else spec.baselines
    cmp = compare_all(
        _read_arg(text_arg),
        chosen,
        lzw_code_bits=spec.lzw_code_bits,
        zstd_level=spec.zstd_level,
    )
    if as_json:
        _print_json(cmp.to_dict())
        return 0
    sys.stdout.write(render_table(cmp))
    return 0


def _cmd_image(rows: list[str], *, preset: str | None, trace: bool, as_json: bool) -> int:
    from compress_lab.bitmap import PRESETS, compress_grid, parse_rows, render_grid, unflatten

    if preset is not None:
        if rows:
            raise UsageError("image: give either ROWS or --preset, not both")
        grid = PRESETS[preset]()
    else:
        grid = parse_rows(rows)
    res = compress_grid(grid)
    if unflatten(res.cells) != grid:
        print(f"{TAG} image roundtrip mismatch", file=sys.stderr)
        return EXIT_GENERIC

    if as_json:
        _print_json(res.to_dict(with_steps=trace))
        return 0

    sys.stdout.write(render_grid(grid))
    print(f"Cells          : {res.cells}")
    print(f"Encoded        : {res.encoded}")
    print(f"Size           : {res.compressed_bits} bits / {res.original_bits} bits")
    print(f"Ratio          : {res.ratio:.2f}%")
    if trace:
        _print_steps(res.steps)
    return 0


def _cmd_describe(codec_arg: str | None) -> int:
    from compress_lab.registry import CODEC_IDS, get_codec

    ids = [codec_arg] if codec_arg else list(CODEC_IDS)
    for i, cid in enumerate(ids):
        codec = get_codec(cid)
        d = codec.description()
        if i:
            print()
        print(f"[{codec.codec_id}]")
        print(f"  summary    : {d.summary}")
        print(f"  strengths  : {d.strengths}")
        print(f"  weaknesses : {d.weaknesses}")
    return 0


def _cmd_config_validate(spec_arg: str) -> int:
    # load is the validation
    load_lab_spec(spec_arg)
    print("OK")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="compress-lab", description="compress-lab: RLE, Huffman and LZW, step by step"
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {_pkg_version()}")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_e = sub.add_parser("encode", help="Encode text and show sizes (and optionally the step trace)")
    p_e.add_argument("text", help="Input text, or @file")
    _add_codec_args(p_e)
    p_e.add_argument("--trace", action="store_true", help="Print every step of the algorithm")
    p_e.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_e)

    p_d = sub.add_parser("decode", help="Decode codec output back to text")
    p_d.add_argument("data", help="Encoded data, or @file")
    _add_codec_args(p_d)
    p_d.add_argument(
        "--table",
        default=None,
        help="Huffman code table (JSON from encode), or @file",
    )
    p_d.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_d)

    p_r = sub.add_parser("roundtrip", help="Encode then decode, print OK when the text comes back")
    p_r.add_argument("text", help="Input text, or @file")
    _add_codec_args(p_r)
    _add_common_args(p_r)

    p_c = sub.add_parser("compare", help="Compare the encoded size of every codec, in bits")
    p_c.add_argument("text", help="Input text, or @file")
    p_c.add_argument(
        "--baseline",
        action="append",
        default=None,
        choices=["zlib", "zstd"],
        help="Add a reference byte compressor row (repeatable)",
    )
    p_c.add_argument(
        "--config",
        default=None,
        help="Run spec JSON (v1). Use '@file.json' to load from file, or pass JSON inline.",
    )
    p_c.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_c)

    p_i = sub.add_parser("image", help="8x8 bitmap mode (RLE over the flattened grid)")
    p_i.add_argument("rows", nargs="*", help="8 rows of 8 characters 0/1, e.g. 00111100")
    p_i.add_argument(
        "--preset",
        default=None,
        choices=["blank", "checker", "split"],
        help="Start from a ready-made grid instead of ROWS",
    )
    p_i.add_argument("--trace", action="store_true", help="Print every RLE step")
    p_i.add_argument("--json", action="store_true", help="Machine-readable output")
    _add_common_args(p_i)

    p_desc = sub.add_parser("describe", help="Summary, strengths and weaknesses of a codec")
    p_desc.add_argument("codec", nargs="?", default=None, help="rle, huffman or lzw (default: all)")
    _add_common_args(p_desc)

    p_v = sub.add_parser("config-validate", help="Validate a run spec (v1)")
    p_v.add_argument("spec", help="Run spec JSON (@file.json or inline JSON)")
    _add_common_args(p_v)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.cmd == "encode":
            return _cmd_encode(
                ns.text,
                codec_arg=ns.codec,
                config_arg=ns.config,
                trace=bool(ns.trace),
                as_json=bool(ns.json),
            )
        if ns.cmd == "decode":
            return _cmd_decode(
                ns.data,
                codec_arg=ns.codec,
                config_arg=ns.config,
                table_arg=ns.table,
                as_json=bool(ns.json),
            )
        if ns.cmd == "roundtrip":
            return _cmd_roundtrip(ns.text, codec_arg=ns.codec, config_arg=ns.config)
        if ns.cmd == "compare":
            return _cmd_compare(
                ns.text, baselines=ns.baseline, config_arg=ns.config, as_json=bool(ns.json)
            )
        if ns.cmd == "image":
            return _cmd_image(
                ns.rows, preset=ns.preset, trace=bool(ns.trace), as_json=bool(ns.json)
            )
        if ns.cmd == "describe":
            return _cmd_describe(ns.codec)
        if ns.cmd == "config-validate":
            return _cmd_config_validate(str(ns.spec))
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except LabSpecError as e:
        # Treat as usage/config error.
        if getattr(ns, "debug", False):
            raise
        print(f"{TAG} {e}", file=sys.stderr)
        return EXIT_USAGE
    except CompressLabError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"{TAG} {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"{TAG} error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
