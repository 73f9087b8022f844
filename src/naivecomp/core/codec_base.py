from __future__ import annotations

from abc import ABC, abstractmethod


class Codec(ABC):
    """
    Interfaccia minima per i codec intercambiabili.

    Ogni chiamata e' indipendente: dizionari, tabelle e buffer di bit
    nascono e muoiono dentro compress()/decompress().
    """

    codec_id: str

    @abstractmethod
    def compress(self, data: bytes) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def decompress(self, comp: bytes) -> bytes:
        raise NotImplementedError
