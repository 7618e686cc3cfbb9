"""Mark definition keys and the per-block registry that hands them out."""

from __future__ import annotations

import itertools
import secrets
import string
from typing import Callable

from .errors import ConversionError
from .model import MarkDef, TextBlock

KeyGenerator = Callable[[], str]

KEY_ALPHABET = string.ascii_letters + string.digits
MAX_KEY_ATTEMPTS = 32


class RandomKeys:
    """Random alphanumeric keys, 12 characters unless told otherwise."""

    def __init__(self, length: int = 12) -> None:
        if length < 1:
            raise ValueError("key length must be positive")
        self.length = length

    def __call__(self) -> str:
        return "".join(secrets.choice(KEY_ALPHABET) for _ in range(self.length))


class SequentialKeys:
    """Deterministic keys ``<prefix>1``, ``<prefix>2``, ... for reproducible output."""

    def __init__(self, prefix: str = "k") -> None:
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"


class MarkDefRegistry:
    def __init__(self, keys: KeyGenerator | None = None) -> None:
        self.keys = keys or RandomKeys()

    def fresh_key(self, block: TextBlock) -> str:
        """Draw a key that no definition in ``block`` uses yet."""
        taken = {mark_def.key for mark_def in block.mark_defs}
        for _ in range(MAX_KEY_ATTEMPTS):
            key = self.keys()
            if key not in taken:
                return key
        raise ConversionError(f"could not generate an unused mark key after {MAX_KEY_ATTEMPTS} attempts")

    def register(self, block: TextBlock, mark_def: MarkDef) -> MarkDef:
        if self.lookup(block, mark_def.key) is not None:
            raise ConversionError(f"mark key {mark_def.key!r} already registered in this block")
        block.mark_defs.append(mark_def)
        return mark_def

    @staticmethod
    def lookup(block: TextBlock, key: str) -> MarkDef | None:
        for mark_def in block.mark_defs:
            if mark_def.key == key:
                return mark_def
        return None
