#!/usr/bin/env python3
"""Compress + decompress a file through the CLI and compare the result.

Usage examples:
  python tools/roundtrip.py some/file.txt
  python tools/roundtrip.py some/file.txt -a huffman --keep
"""

from __future__ import annotations

import argparse
import subprocess
import sys
import tempfile
from pathlib import Path


def _run(cmd: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(cmd, text=True, capture_output=True)


def _cli(*args: str) -> list[str]:
    return [sys.executable, "-c", "from naivecomp.cli import main; raise SystemExit(main())", *args]


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="roundtrip.py", description="naivecomp file round-trip")
    ap.add_argument("input", type=Path)
    ap.add_argument("-a", "--algorithm", default="lzw")
    ap.add_argument("--keep", action="store_true", help="Keep the temp directory")
    ns = ap.parse_args(argv)

    orig = ns.input.resolve()
    if not orig.is_file():
        raise SystemExit(f"input non valido: {orig}")

    work = Path(tempfile.mkdtemp(prefix="naivecomp_rt_"))
    compressed = work / (orig.name + ".cmp")
    recovered = work / ("recovered-" + orig.name)

    print(f"compressing [{orig}] into [{compressed}]...")
    r = _run(_cli("-a", ns.algorithm, "--stats", "compress", str(orig), "-o", str(compressed)))
    print(r.stdout, end="")
    if r.returncode != 0:
        print(r.stderr, end="", file=sys.stderr)
        return r.returncode

    print(f"decompressing [{compressed}] into [{recovered}]...")
    r = _run(_cli("-a", ns.algorithm, "decompress", str(compressed), "-o", str(recovered)))
    if r.returncode != 0:
        print(r.stderr, end="", file=sys.stderr)
        return r.returncode

    same = orig.read_bytes() == recovered.read_bytes()
    print("ok" if same else "files differ")

    if not ns.keep:
        compressed.unlink(missing_ok=True)
        recovered.unlink(missing_ok=True)
        work.rmdir()
    return 0 if same else 1


if __name__ == "__main__":
    raise SystemExit(main())
