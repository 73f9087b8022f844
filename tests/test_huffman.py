from __future__ import annotations

import random

import pytest

from naivecomp.core.codec_huffman import (
    HUFFMAN_MAGIC,
    CodecHuffman,
    HuffmanNode,
    build_code_table,
    build_freq_table,
    build_huffman_tree,
    huffman_compress,
    huffman_decompress,
    pack_header,
    unpack_header,
)
from naivecomp.errors import BadHeader, BadMagic, CorruptPayload, TruncatedStream

# Golden vector: b"AAB"
#   "HUF1" + count(u16)=2 + ('A', 2) + ('B', 1) + total(u32)=3 + payload
#   tree: root(left=B, right=A) -> A=1, B=0 -> bits 110 -> 0xc0
HUF_AAB_HEX = "48554631" "0002" "4100000002" "4200000001" "00000003" "c0"


def _rng_bytes(seed: int, n: int, alphabet: bytes | None = None) -> bytes:
    rng = random.Random(seed)
    if alphabet is None:
        return bytes(rng.randrange(256) for _ in range(n))
    return bytes(rng.choice(alphabet) for _ in range(n))


def _skewed(seed: int, n: int) -> bytes:
    rng = random.Random(seed)
    weights = [2 ** (i % 9) for i in range(40)]
    return bytes(rng.choices(range(40), weights=weights, k=n))


SAMPLES = [
    b"",
    b"A",
    b"AAAA",
    b"AAABBBAABACD",
    bytes(range(256)),
    bytes(reversed(range(256))) * 3,
    "olá, mundo! como vai?".encode("utf-8"),
    _rng_bytes(1, 5000),
    _skewed(2, 5000),
]


def _is_prefix_free(codes: dict[int, list[int]]) -> bool:
    words = ["".join(map(str, bits)) for bits in codes.values()]
    for i, a in enumerate(words):
        for j, b in enumerate(words):
            if i != j and b.startswith(a):
                return False
    return True


def _walk(node: HuffmanNode):
    yield node
    if not node.is_leaf:
        yield from _walk(node.left)
        yield from _walk(node.right)


def test_freq_table_first_occurrence_order() -> None:
    freq = build_freq_table(b"AAABBBAABACD")
    assert freq == {65: 6, 66: 4, 67: 1, 68: 1}
    assert list(freq) == [65, 66, 67, 68]

    assert list(build_freq_table(b"zyzx")) == [ord("z"), ord("y"), ord("x")]


def test_code_table_known_lengths() -> None:
    root = build_huffman_tree(build_freq_table(b"AAABBBAABACD"))
    codes = build_code_table(root)

    assert codes[ord("A")] == [0]
    assert codes[ord("B")] == [1, 1]
    # a parita' di frequenza vince l'ordine di apparizione: C prima di D
    assert codes[ord("C")] == [1, 0, 0]
    assert codes[ord("D")] == [1, 0, 1]


def test_empty_tree() -> None:
    assert build_huffman_tree({}) is None


def test_internal_nodes_have_two_children() -> None:
    root = build_huffman_tree(build_freq_table(_skewed(3, 3000)))
    for node in _walk(root):
        if node.symbol is None:
            assert node.left is not None and node.right is not None
            assert node.freq == node.left.freq + node.right.freq


@pytest.mark.parametrize("data", [d for d in SAMPLES if d])
def test_prefix_free(data: bytes) -> None:
    codes = build_code_table(build_huffman_tree(build_freq_table(data)))
    assert set(codes) == set(data)
    assert _is_prefix_free(codes)


@pytest.mark.parametrize("data", [d for d in SAMPLES if d])
def test_higher_frequency_never_longer_code(data: bytes) -> None:
    freq = build_freq_table(data)
    codes = build_code_table(build_huffman_tree(freq))
    for a in freq:
        for b in freq:
            if freq[a] > freq[b]:
                assert len(codes[a]) <= len(codes[b]), (a, b)


def test_single_symbol_gets_one_bit_code() -> None:
    root = build_huffman_tree(build_freq_table(b"AAAA"))
    assert root is not None and root.is_leaf
    assert build_code_table(root) == {ord("A"): [0]}

    comp = huffman_compress(b"AAAA")
    header = pack_header({ord("A"): 4}, 4)
    assert comp == header + b"\x00"
    assert huffman_decompress(comp) == b"AAAA"


def test_all_256_values_once() -> None:
    data = bytes(random.Random(4).sample(range(256), 256))
    root = build_huffman_tree(build_freq_table(data))
    codes = build_code_table(root)

    assert sum(1 for n in _walk(root) if n.is_leaf) == 256
    assert all(len(bits) == 8 for bits in codes.values())
    assert _is_prefix_free(codes)
    assert huffman_decompress(huffman_compress(data)) == data


def test_golden_vector() -> None:
    assert huffman_compress(b"AAB").hex() == HUF_AAB_HEX
    assert huffman_decompress(bytes.fromhex(HUF_AAB_HEX)) == b"AAB"


@pytest.mark.parametrize("data", SAMPLES)
def test_roundtrip(data: bytes) -> None:
    assert huffman_decompress(huffman_compress(data)) == data


def test_empty_input_is_empty_output() -> None:
    assert huffman_compress(b"") == b""
    assert huffman_decompress(b"") == b""


def test_deterministic() -> None:
    data = _skewed(5, 4000)
    assert huffman_compress(data) == huffman_compress(data)


def test_header_roundtrip_keeps_order() -> None:
    freq = {200: 3, 7: 1, 0: 9}
    blob = pack_header(freq, 13) + b"\xff"
    got, total, idx = unpack_header(blob)
    assert list(got.items()) == list(freq.items())
    assert total == 13
    assert blob[idx:] == b"\xff"


def test_skewed_input_compresses() -> None:
    data = _skewed(6, 20000)
    assert len(huffman_compress(data)) < len(data)


def test_trailing_bytes_after_payload_are_ignored() -> None:
    comp = huffman_compress(b"hello huffman")
    assert huffman_decompress(comp + b"\xff\xff") == b"hello huffman"


def test_truncated_payload() -> None:
    data = _skewed(7, 2000)
    comp = huffman_compress(data)
    _, _, idx = unpack_header(comp)

    with pytest.raises(TruncatedStream):
        huffman_decompress(comp[: idx + (len(comp) - idx) // 2])
    with pytest.raises(TruncatedStream):
        huffman_decompress(comp[:idx])


def test_truncated_header() -> None:
    comp = huffman_compress(b"hello")
    for cut in (2, 5, 8, len(comp) - 3):
        with pytest.raises(TruncatedStream):
            huffman_decompress(comp[:cut])


def test_bad_magic() -> None:
    with pytest.raises(BadMagic):
        huffman_decompress(b"not a huffman stream")
    with pytest.raises(CorruptPayload):
        huffman_decompress(b"XUF1" + huffman_compress(b"abc")[4:])


@pytest.mark.parametrize(
    "blob",
    [
        HUFFMAN_MAGIC + b"\x00\x00" + b"\x00\x00\x00\x00",
        HUFFMAN_MAGIC + b"\x01\x01" + b"\x00" * 8,
        HUFFMAN_MAGIC + b"\x00\x02" + b"A\x00\x00\x00\x01" + b"A\x00\x00\x00\x01" + b"\x00\x00\x00\x02",
        HUFFMAN_MAGIC + b"\x00\x01" + b"A\x00\x00\x00\x00" + b"\x00\x00\x00\x00",
        HUFFMAN_MAGIC + b"\x00\x01" + b"A\x00\x00\x00\x02" + b"\x00\x00\x00\x05" + b"\x00",
    ],
    ids=["count-zero", "count-too-big", "duplicate", "zero-freq", "total-mismatch"],
)
def test_inconsistent_header(blob: bytes) -> None:
    with pytest.raises(BadHeader):
        huffman_decompress(blob)


def test_codec_object() -> None:
    c = CodecHuffman()
    assert c.codec_id == "huffman"
    assert c.decompress(c.compress(b"abracadabra")) == b"abracadabra"
