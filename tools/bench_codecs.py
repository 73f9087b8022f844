#!/usr/bin/env python3
"""Codec benchmark: naivecomp codecs vs zlib / zstd baselines.

For each codec: compress -> decompress -> compare, collecting sizes and timing.

Usage example:
  python tools/bench_codecs.py some/file.bin --iters 3
  python tools/bench_codecs.py some/file.bin --max-code-width 12 --reset-policy reset --json

Notes:
- Uses internal APIs (no subprocess). Run inside repo venv.
- zstd baseline needs 'zstandard'; without it the row is reported as unavailable.
"""

from __future__ import annotations

import argparse
import json
import time
import zlib
from pathlib import Path
from typing import Any, Callable

try:
    import zstandard as zstd  # type: ignore
except Exception:  # pragma: no cover
    zstd = None


def _baselines(level_zlib: int, level_zstd: int) -> dict[str, tuple[Callable, Callable] | None]:
    out: dict[str, tuple[Callable, Callable] | None] = {
        "zlib": (
            lambda b: zlib.compress(b, level_zlib),
            zlib.decompress,
        ),
    }
    if zstd is None:
        out["zstd"] = None
    else:
        c = zstd.ZstdCompressor(level=level_zstd)
        d = zstd.ZstdDecompressor()
        out["zstd"] = (c.compress, d.decompress)
    return out


def bench_one(name: str, enc: Callable, dec: Callable, data: bytes, iters: int) -> dict[str, Any]:
    t_enc = 0.0
    t_dec = 0.0
    comp = b""
    ok = True
    for _ in range(max(1, iters)):
        t0 = time.perf_counter()
        comp = enc(data)
        t_enc += time.perf_counter() - t0

        t1 = time.perf_counter()
        back = dec(comp)
        t_dec += time.perf_counter() - t1
        ok = ok and back == data

    n = max(1, iters)
    saved = (1.0 - len(comp) / len(data)) * 100.0 if data else 0.0
    return {
        "codec": name,
        "in_bytes": len(data),
        "out_bytes": len(comp),
        "saved_pct": round(saved, 2),
        "compress_ms": round(t_enc / n * 1000, 3),
        "decompress_ms": round(t_dec / n * 1000, 3),
        "roundtrip_ok": bool(ok),
    }


def run_bench(
    data: bytes,
    *,
    iters: int = 1,
    max_code_width: int | None = None,
    reset_policy: str = "freeze",
    baselines: bool = True,
) -> list[dict[str, Any]]:
    from naivecomp.core.codec_lzw import LzwOptions
    from naivecomp.core.registry import ALGORITHMS, make_codec

    opts = LzwOptions(max_code_width=max_code_width, reset_policy=reset_policy)
    rows: list[dict[str, Any]] = []
    for algo in ALGORITHMS:
        codec = make_codec(algo, opts)
        rows.append(bench_one(algo, codec.compress, codec.decompress, data, iters))

    if baselines:
        for name, fns in _baselines(9, 19).items():
            if fns is None:
                rows.append({"codec": name, "available": False})
                continue
            enc, dec = fns
            rows.append(bench_one(name, enc, dec, data, iters))
    return rows


def _render_table(rows: list[dict[str, Any]]) -> str:
    head = f"{'codec':<10}{'in':>12}{'out':>12}{'saved%':>9}{'c_ms':>11}{'d_ms':>11}  ok"
    lines = [head, "-" * len(head)]
    for r in rows:
        if r.get("available") is False:
            lines.append(f"{r['codec']:<10}{'(not installed)':>24}")
            continue
        lines.append(
            f"{r['codec']:<10}{r['in_bytes']:>12}{r['out_bytes']:>12}{r['saved_pct']:>9.2f}"
            f"{r['compress_ms']:>11.3f}{r['decompress_ms']:>11.3f}  {'yes' if r['roundtrip_ok'] else 'NO'}"
        )
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="bench_codecs.py", description="naivecomp codec benchmark")
    ap.add_argument("input", type=Path)
    ap.add_argument("--iters", type=int, default=1)
    ap.add_argument("--max-code-width", type=int, default=None)
    ap.add_argument("--reset-policy", default="freeze")
    ap.add_argument("--no-baselines", action="store_true", help="Skip zlib/zstd rows")
    ap.add_argument("--json", action="store_true", help="Print one JSON object per row")
    ns = ap.parse_args(argv)

    inp = ns.input.resolve()
    if not inp.is_file():
        raise SystemExit(f"input non valido: {inp}")

    rows = run_bench(
        inp.read_bytes(),
        iters=int(ns.iters),
        max_code_width=ns.max_code_width,
        reset_policy=str(ns.reset_policy),
        baselines=not ns.no_baselines,
    )

    if ns.json:
        for r in rows:
            print(json.dumps(r, ensure_ascii=False))
    else:
        print(_render_table(rows))

    if any(r.get("roundtrip_ok") is False for r in rows):
        raise SystemExit("roundtrip mismatch: codec non lossless")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
