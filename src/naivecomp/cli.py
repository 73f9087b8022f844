"""naivecomp CLI.

This is the stable CLI entrypoint (console-script: ``naivecomp``).

UX policy:
  - one algorithm switch (-a), two actions (compress/decompress)
  - the whole input is read in memory, the output file is rewritten
  - --stats times the codec call and reports the size delta
"""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from naivecomp.codec_spec import load_codec_spec
from naivecomp.core.codec_lzw import RESET_POLICIES, LzwOptions
from naivecomp.core.registry import ALGORITHMS, make_codec
from naivecomp.errors import EXIT_GENERIC, EXIT_OK, InputFileError, NaiveCompError, UsageError
from naivecomp.stats import render_stats, run_with_stats


def _version() -> str:
    try:
        return version("naivecomp")
    except PackageNotFoundError:
        return "0+unknown"


def _add_common_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--debug", action="store_true", help="Show stack traces on errors")


def _read_input(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as e:
        raise InputFileError(f"cannot read input {path}: {e.strerror or e}") from e


def _write_output(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise InputFileError(f"cannot write output {path}: {e.strerror or e}") from e


def _resolve_codec_args(ns: argparse.Namespace) -> tuple[str, LzwOptions]:
    """--config is the source of truth; otherwise -a/--max-code-width/--reset-policy."""
    if ns.config is not None:
        spec = load_codec_spec(str(ns.config))
        return spec.algorithm, spec.lzw_options()

    if ns.algorithm is None:
        raise UsageError("missing algorithm: use -a {lzw,huffman} or --config")
    return ns.algorithm, LzwOptions(max_code_width=ns.max_code_width, reset_policy=ns.reset_policy)


def _run_action(ns: argparse.Namespace) -> int:
    algorithm, lzw_options = _resolve_codec_args(ns)
    codec = make_codec(algorithm, lzw_options)
    compress = ns.action == "compress"

    data = _read_input(ns.input)
    fn = codec.compress if compress else codec.decompress
    out, stats = run_with_stats(fn, data)
    _write_output(ns.output, out)

    if ns.stats:
        print(render_stats(stats, compress=compress))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="naivecomp", description="Naive LZW / Huffman byte-stream compressor"
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    p.add_argument(
        "-a",
        "--algorithm",
        choices=ALGORITHMS,
        default=None,
        help="The algorithm to use for compress or decompress",
    )
    p.add_argument("--stats", action="store_true", help="Show elapsed time and space saved")
    p.add_argument(
        "--max-code-width",
        type=int,
        default=None,
        help="LZW only: cap the code width (>= 9). Default: unbounded.",
    )
    p.add_argument(
        "--reset-policy",
        choices=RESET_POLICIES,
        default="freeze",
        help="LZW only: what to do when the capped code space is full (default: freeze)",
    )
    p.add_argument(
        "--config",
        default=None,
        help=(
            "Codec spec (JSON). Use '@file.json' to load from file, or pass JSON inline. "
            "When set, -a/--max-code-width/--reset-policy are ignored."
        ),
    )

    sub = p.add_subparsers(dest="action", required=True)

    p_c = sub.add_parser("compress", help="Compress a file")
    p_c.add_argument("input", type=Path, help="The file to compress")
    p_c.add_argument("-o", dest="output", type=Path, required=True, help="The output path")
    _add_common_args(p_c)

    p_d = sub.add_parser("decompress", help="Decompress a file")
    p_d.add_argument("input", type=Path, help="The file to decompress")
    p_d.add_argument("-o", dest="output", type=Path, required=True, help="The output path")
    _add_common_args(p_d)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    p = build_parser()
    ns = p.parse_args(argv)

    try:
        if ns.action in {"compress", "decompress"}:
            return _run_action(ns)
        raise AssertionError("unreachable")

    except SystemExit:
        raise
    except NaiveCompError as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[naivecomp] {e}", file=sys.stderr)
        return int(getattr(e, "exit_code", EXIT_GENERIC) or EXIT_GENERIC)
    except Exception as e:
        if getattr(ns, "debug", False):
            raise
        print(f"[naivecomp] error: {e}", file=sys.stderr)
        return EXIT_GENERIC


if __name__ == "__main__":
    raise SystemExit(main())
