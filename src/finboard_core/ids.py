"""Sale id generation.

The orchestrator takes an ``id_factory`` callable so tests can pass a
deterministic one. The default mirrors the ids already stored by the
dashboard: milliseconds since the epoch in base 36 followed by random
base-36 digits.
"""

from __future__ import annotations

import itertools
import secrets
import time
from typing import Callable

IdFactory = Callable[[], str]

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(n: int) -> str:
    """Examples:
    >>> to_base36(35)
    'z'
    """
    if n < 0:
        raise ValueError("n must be non-negative")
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_DIGITS[r])
    return "".join(reversed(out))


def generate_id() -> str:
    """Time-plus-random identifier, unique within one process in practice."""
    millis = time.time_ns() // 1_000_000
    return to_base36(millis) + to_base36(secrets.randbits(52))


class SequentialIds:
    """Deterministic ids: ``sale-1``, ``sale-2``, ...

    Examples:
        >>> ids = SequentialIds()
        >>> ids(), ids()
        ('sale-1', 'sale-2')
    """

    def __init__(self, prefix: str = "sale-", start: int = 1) -> None:
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}{next(self._counter)}"
