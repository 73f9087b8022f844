from __future__ import annotations

from naivecomp.core.codec_base import Codec
from naivecomp.core.codec_huffman import CodecHuffman
from naivecomp.core.codec_lzw import CodecLzw, LzwOptions
from naivecomp.errors import UsageError

ALGORITHMS: tuple[str, ...] = ("lzw", "huffman")


def make_codec(algorithm: str, lzw_options: LzwOptions | None = None) -> Codec:
    """Algorithm switch: nome -> codec nuovo (nessuno stato condiviso tra chiamate)."""
    algo = str(algorithm).strip().lower()
    if algo == "lzw":
        return CodecLzw(options=lzw_options or LzwOptions())
    if algo == "huffman":
        return CodecHuffman()
    raise UsageError(f"algoritmo non supportato: {algorithm!r} (attesi: {', '.join(ALGORITHMS)})")
