from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from naivecomp.core.bitio import BitReader, BitWriter
from naivecomp.core.codec_base import Codec
from naivecomp.errors import BadHeader, BadMagic, TruncatedStream, UnexpectedEof, UsageError

import heapq
import itertools

HUFFMAN_MAGIC = b"HUF1"
MAX_SYMBOLS = 0xFFFFFFFF  # total e freq sono u32


# -------------------
# Strutture di base Huffman
# -------------------
@dataclass
class HuffmanNode:
    freq: int
    symbol: Optional[int] = None  # 0-255 per foglie, None per interni
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None


def build_freq_table(data: bytes) -> Dict[int, int]:
    """byte -> occorrenze, in ordine di prima apparizione."""
    freq: Dict[int, int] = {}
    for b in data:
        freq[b] = freq.get(b, 0) + 1
    return freq


def build_huffman_tree(freq: Dict[int, int]) -> Optional[HuffmanNode]:
    """
    Merge ripetuto dei due nodi a frequenza minima.
    A parita' di frequenza vince l'ordine di inserimento: foglie nell'ordine
    di `freq`, poi i nodi interni nell'ordine in cui vengono creati.
    """
    heap: List[Tuple[int, int, HuffmanNode]] = []
    counter = itertools.count()

    for sym, f in freq.items():
        if f > 0:
            node = HuffmanNode(freq=f, symbol=sym)
            heapq.heappush(heap, (f, next(counter), node))

    if not heap:
        return None

    # Caso degenere: un solo simbolo => albero di una sola foglia (codice a 1 bit)
    while len(heap) > 1:
        f1, _, n1 = heapq.heappop(heap)
        f2, _, n2 = heapq.heappop(heap)
        parent = HuffmanNode(freq=f1 + f2, left=n1, right=n2)
        heapq.heappush(heap, (parent.freq, next(counter), parent))

    return heap[0][2]


def build_code_table(root: HuffmanNode) -> Dict[int, List[int]]:
    codes: Dict[int, List[int]] = {}

    def dfs(node: HuffmanNode, path: List[int]):
        if node.is_leaf:
            codes[node.symbol] = path.copy() if path else [0]
            return
        dfs(node.left, path + [0])
        dfs(node.right, path + [1])

    dfs(root, [])
    return codes


def _bits_to_int(bits: List[int]) -> int:
    v = 0
    for bit in bits:
        v = (v << 1) | bit
    return v


def encode_payload(data: bytes, codes: Dict[int, List[int]]) -> bytes:
    packed = {sym: (_bits_to_int(bits), len(bits)) for sym, bits in codes.items()}
    writer = BitWriter()
    for b in data:
        value, width = packed[b]
        writer.write_bits(value, width)
    return writer.finish()


def decode_payload(root: HuffmanNode, payload: bytes, n: int) -> bytes:
    """
    Cammina l'albero bit per bit finche' non ha emesso esattamente n simboli.
    I bit di padding rimasti vengono ignorati.
    """
    reader = BitReader(payload)
    out = bytearray()
    node = root

    try:
        while len(out) < n:
            bit = reader.read_bits(1)
            if root.is_leaf:
                out.append(root.symbol)
                continue
            node = node.right if bit else node.left
            if node.is_leaf:
                out.append(node.symbol)
                node = root
    except UnexpectedEof as e:
        raise TruncatedStream(f"huffman: attesi {n} simboli, decodificati {len(out)}") from e

    return bytes(out)


# -------------------
# Header: magic, count, (sym, freq)*, total
# -------------------
def pack_header(freq: Dict[int, int], total: int) -> bytes:
    out = bytearray()
    out += HUFFMAN_MAGIC
    out += len(freq).to_bytes(2, "big")
    for sym, f in freq.items():
        out.append(sym)
        out += f.to_bytes(4, "big")
    out += total.to_bytes(4, "big")
    return bytes(out)


def unpack_header(blob: bytes) -> Tuple[Dict[int, int], int, int]:
    """blob -> (freq, total, idx del payload)."""
    if len(blob) < len(HUFFMAN_MAGIC):
        raise TruncatedStream("huffman: header troncato (magic)")
    if blob[:4] != HUFFMAN_MAGIC:
        raise BadMagic("huffman: magic non valido (non e' uno stream huffman)")
    idx = 4

    if idx + 2 > len(blob):
        raise TruncatedStream("huffman: header troncato (count)")
    count = int.from_bytes(blob[idx:idx+2], "big"); idx += 2
    if count < 1 or count > 256:
        raise BadHeader(f"huffman: numero di simboli non valido: {count}")

    freq: Dict[int, int] = {}
    for _ in range(count):
        if idx + 5 > len(blob):
            raise TruncatedStream("huffman: header troncato (freq entries)")
        sym = blob[idx]; idx += 1
        f = int.from_bytes(blob[idx:idx+4], "big"); idx += 4
        if sym in freq:
            raise BadHeader(f"huffman: simbolo duplicato nell'header: {sym}")
        if f == 0:
            raise BadHeader(f"huffman: frequenza nulla per il simbolo {sym}")
        freq[sym] = f

    if idx + 4 > len(blob):
        raise TruncatedStream("huffman: header troncato (total)")
    total = int.from_bytes(blob[idx:idx+4], "big"); idx += 4
    if total != sum(freq.values()):
        raise BadHeader(f"huffman: total {total} != somma frequenze {sum(freq.values())}")

    return freq, total, idx


def huffman_compress(data: bytes) -> bytes:
    if not data:
        return b""
    if len(data) > MAX_SYMBOLS:
        raise UsageError(f"huffman: input troppo lungo ({len(data)} byte, max {MAX_SYMBOLS})")
    freq = build_freq_table(data)
    root = build_huffman_tree(freq)
    codes = build_code_table(root)
    return pack_header(freq, len(data)) + encode_payload(data, codes)


def huffman_decompress(comp: bytes) -> bytes:
    if not comp:
        return b""
    freq, total, idx = unpack_header(comp)
    root = build_huffman_tree(freq)
    return decode_payload(root, comp[idx:], total)


class CodecHuffman(Codec):
    codec_id = "huffman"

    def compress(self, data: bytes) -> bytes:
        return huffman_compress(bytes(data))

    def decompress(self, comp: bytes) -> bytes:
        return huffman_decompress(bytes(comp))
