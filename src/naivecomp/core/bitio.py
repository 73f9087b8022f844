from __future__ import annotations

from naivecomp.errors import UnexpectedEof


class BitWriter:
    """
    Accumula bit MSB-first e li impacchetta in byte.

    L'ultimo byte parziale viene completato con zeri da finish():
    chi decodifica deve sapere da solo dove finiscono i bit utili.
    """

    def __init__(self) -> None:
        self._out = bytearray()
        self._buffer = 0
        self._n_bits = 0
        self._total = 0

    @property
    def bit_length(self) -> int:
        """Numero di bit significativi scritti finora (padding escluso)."""
        return self._total

    def write_bits(self, value: int, width: int) -> None:
        if width < 0:
            raise ValueError(f"width negativa: {width}")
        if width == 0:
            return
        self._buffer = (self._buffer << width) | (int(value) & ((1 << width) - 1))
        self._n_bits += width
        self._total += width

        while self._n_bits >= 8:
            self._n_bits -= 8
            self._out.append((self._buffer >> self._n_bits) & 0xFF)
            self._buffer &= (1 << self._n_bits) - 1

    def finish(self) -> bytes:
        if self._n_bits > 0:
            self._out.append((self._buffer << (8 - self._n_bits)) & 0xFF)
            self._buffer = 0
            self._n_bits = 0
        return bytes(self._out)


class BitReader:
    """Legge bit MSB-first da un buffer in memoria, con cursore."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0
        self._end = len(self._data) * 8

    @property
    def remaining(self) -> int:
        return self._end - self._pos

    def at_end(self, width: int = 1) -> bool:
        return self.remaining < width

    def read_bits(self, width: int) -> int:
        if width < 0:
            raise ValueError(f"width negativa: {width}")
        if width > self.remaining:
            raise UnexpectedEof(
                f"bit stream esaurito: richiesti {width} bit, disponibili {self.remaining}"
            )
        if width == 0:
            return 0

        start = self._pos
        stop = start + width
        first = start // 8
        last = (stop + 7) // 8
        chunk = int.from_bytes(self._data[first:last], "big")
        # bit in eccesso a destra dell'ultimo byte toccato
        chunk >>= last * 8 - stop
        self._pos = stop
        return chunk & ((1 << width) - 1)
