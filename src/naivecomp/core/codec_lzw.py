from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from naivecomp.core.bitio import BitReader, BitWriter
from naivecomp.core.codec_base import Codec
from naivecomp.errors import CorruptStream, UsageError

# -------------------
# Costanti del formato LZW
# -------------------
MIN_CODE_WIDTH = 9  # basta per 0..256
EOS_CODE = 256  # fine stream, distinto dal padding
FIRST_CODE = 257  # primo codice assegnato alle nuove entry

RESET_POLICIES: tuple[str, ...] = ("freeze", "reset")


@dataclass(frozen=True)
class LzwOptions:
    """
    Parametri dello spazio dei codici.

    max_code_width=None: dizionario illimitato (comportamento naive).
    Con un tetto, reset_policy decide cosa succede quando i codici finiscono:
      - "freeze": il dizionario smette di crescere
      - "reset": si riparte dal dizionario iniziale (257 entry, 9 bit)

    Lo stream non ha header: encoder e decoder devono usare le stesse opzioni.
    """

    max_code_width: int | None = None
    reset_policy: str = "freeze"

    def __post_init__(self) -> None:
        w = self.max_code_width
        if w is not None:
            if isinstance(w, bool) or not isinstance(w, int):
                raise UsageError(f"lzw: max_code_width deve essere intero, got {w!r}")
            if w < MIN_CODE_WIDTH:
                raise UsageError(f"lzw: max_code_width deve essere >= {MIN_CODE_WIDTH}, got {w}")
        if self.reset_policy not in RESET_POLICIES:
            raise UsageError(
                f"lzw: reset_policy non supportata: {self.reset_policy!r} "
                f"(attese: {', '.join(RESET_POLICIES)})"
            )


def code_width(code: int, options: LzwOptions) -> int:
    """Bit necessari per rappresentare `code`, tra MIN_CODE_WIDTH e il tetto."""
    w = max(MIN_CODE_WIDTH, int(code).bit_length())
    if options.max_code_width is not None:
        w = min(w, options.max_code_width)
    return w


class _CodeSpace:
    """Contatore dei codici assegnati, comune a encoder e decoder."""

    def __init__(self, options: LzwOptions) -> None:
        self.options = options
        self.next_code = FIRST_CODE

    @property
    def full(self) -> bool:
        cap = self.options.max_code_width
        return cap is not None and self.next_code >= (1 << cap)

    @property
    def resets(self) -> bool:
        return self.options.max_code_width is not None and self.options.reset_policy == "reset"

    @property
    def write_width(self) -> int:
        """Larghezza che copre il codice piu' alto gia' assegnato."""
        return code_width(self.next_code - 1, self.options)

    @property
    def read_width(self) -> int:
        """Larghezza che copre anche il prossimo codice (caso KwKwK)."""
        return code_width(self.next_code, self.options)


class EncoderDictionary(_CodeSpace):
    def __init__(self, options: LzwOptions) -> None:
        super().__init__(options)
        self.clear()

    def clear(self) -> None:
        self.codes: dict[bytes, int] = {bytes((i,)): i for i in range(256)}
        self.next_code = FIRST_CODE

    def __contains__(self, entry: bytes) -> bool:
        return entry in self.codes

    def __getitem__(self, entry: bytes) -> int:
        return self.codes[entry]

    def add(self, entry: bytes) -> bool:
        """Inserisce entry. Ritorna True se invece il dizionario e' stato azzerato."""
        if self.full:
            if self.resets:
                self.clear()
                return True
            return False
        self.codes[entry] = self.next_code
        self.next_code += 1
        return False

    def settle(self) -> None:
        # Dopo l'ultimo match il decoder fa ancora un inserimento (non sa che e'
        # l'ultimo): se quello riempie lo spazio, sotto "reset" azzera prima di EOS.
        if self.full and self.resets:
            self.clear()


class DecoderDictionary(_CodeSpace):
    def __init__(self, options: LzwOptions) -> None:
        super().__init__(options)
        self.clear()

    def clear(self) -> None:
        # entries[code] -> entry; la posizione EOS_CODE non e' mai risolvibile
        self.entries: list[bytes] = [bytes((i,)) for i in range(256)]
        self.entries.append(b"")
        self.next_code = FIRST_CODE

    def add(self, entry: bytes) -> bool:
        """
        Inserisce entry. Ritorna True se lo spazio si e' appena riempito e,
        sotto "reset", il dizionario e' stato azzerato.

        Il decoder e' un inserimento indietro rispetto all'encoder: azzera
        subito dopo aver riempito l'ultimo slot, l'encoder al tentativo successivo.
        """
        if self.full:
            return False
        self.entries.append(entry)
        self.next_code += 1
        if self.full and self.resets:
            self.clear()
            return True
        return False

    def replay(self, code: int, previous: bytes | None) -> tuple[bytes, bool]:
        """
        Un passo di replay: risolve `code` e inserisce previous + entry[0],
        come l'encoder aveva inserito match + byte successivo.

        Ritorna (entry, reset).
        """
        entry = resolve_entry(self.entries, code, previous)
        reset = False
        if previous is not None:
            reset = self.add(previous + entry[:1])
        return entry, reset


def resolve_entry(entries: list[bytes], code: int, previous: bytes | None) -> bytes:
    """
    Risolve un codice letto dal decoder.

    - codice noto -> la sua entry
    - codice == prossimo da assegnare (KwKwK) -> previous + previous[0]
    - altrimenti CorruptStream
    """
    if code == EOS_CODE:
        raise CorruptStream("lzw: codice EOS non risolvibile come entry")
    if 0 <= code < len(entries):
        return entries[code]
    if code == len(entries) and previous:
        return previous + previous[:1]
    raise CorruptStream(f"lzw: codice sconosciuto {code} (prossimo codice {len(entries)})")


def iter_codes(data: bytes, options: LzwOptions | None = None) -> Iterator[tuple[int, int]]:
    """
    data -> sequenza di (codice, larghezza) nell'ordine di emissione, EOS incluso.
    Input vuoto -> nessun codice (nessun dizionario costruito).
    """
    if not data:
        return
    if options is None:
        options = LzwOptions()

    dictionary = EncoderDictionary(options)
    match = b""

    for byte in bytes(data):
        candidate = match + bytes((byte,))
        if candidate in dictionary:
            match = candidate
            continue

        yield dictionary[match], dictionary.write_width
        dictionary.add(candidate)
        match = candidate[-1:]

    yield dictionary[match], dictionary.write_width
    dictionary.settle()
    yield EOS_CODE, dictionary.read_width


def lzw_compress(data: bytes, options: LzwOptions | None = None) -> bytes:
    if not data:
        return b""
    writer = BitWriter()
    for code, width in iter_codes(data, options):
        writer.write_bits(code, width)
    return writer.finish()


def lzw_decompress(comp: bytes, options: LzwOptions | None = None) -> bytes:
    """
    Legge codici fino a EOS o fino all'esaurimento dei bit.
    Codici non risolvibili -> CorruptStream.
    """
    if not comp:
        return b""
    if options is None:
        options = LzwOptions()

    dictionary = DecoderDictionary(options)
    reader = BitReader(comp)
    out = bytearray()
    previous: bytes | None = None

    while not reader.at_end(dictionary.read_width):
        code = reader.read_bits(dictionary.read_width)
        if code == EOS_CODE:
            break
        entry, reset = dictionary.replay(code, previous)
        out += entry
        previous = None if reset else entry

    return bytes(out)


@dataclass
class CodecLzw(Codec):
    options: LzwOptions = field(default_factory=LzwOptions)
    codec_id: str = "lzw"

    def compress(self, data: bytes) -> bytes:
        return lzw_compress(bytes(data), self.options)

    def decompress(self, comp: bytes) -> bytes:
        return lzw_decompress(bytes(comp), self.options)
