"""Providers that never repeat a value.

Usage:
    names = UniqueSequence(prefix="Account ")     # "Account 0", "Account 1", ...
    codes = UniqueToken(prefix="AC", length=8)    # "AC000000", "AC000001", ...

A provider's counter lives as long as the instance. Share one instance
across builders to keep values distinct across batches; construct a fresh
one per call to restart the counter.
"""

from __future__ import annotations

import itertools
from typing import Any

from fixtory.config import get_settings
from fixtory.core.provider import ProviderExhaustedError, ResolutionContext

_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _base36(value: int) -> str:
    if value == 0:
        return _ALPHABET[0]
    digits = []
    while value:
        value, remainder = divmod(value, len(_ALPHABET))
        digits.append(_ALPHABET[remainder])
    return "".join(reversed(digits))


class UniqueSequence:
    """Returns `prefix + counter`, incrementing the counter per invocation.

    Args:
        prefix: Text placed before the counter. None returns the bare int.
        seed: First counter value (default: settings.sequence_seed).
    """

    def __init__(self, prefix: str | None = "", seed: int | None = None):
        self._prefix = prefix
        self._seed = get_settings().sequence_seed if seed is None else seed
        self._counter = itertools.count(self._seed)
        self._issued = 0

    @property
    def issued(self) -> int:
        """Number of values handed out so far."""
        return self._issued

    def next(self, index: int, context: ResolutionContext) -> Any:
        value = next(self._counter)
        self._issued += 1
        if self._prefix is None:
            return value
        return f"{self._prefix}{value}"


class UniqueToken:
    """Fixed-length uppercase alphanumeric token: prefix plus base-36 counter.

    The counter is left-padded with zeros to fill the length. Tokens are
    never truncated; once the counter no longer fits the provider is
    exhausted.

    Args:
        prefix: Alphanumeric text the token starts with.
        length: Exact token length (default: settings.token_length).
        seed: First counter value (default: settings.sequence_seed).

    Raises:
        ValueError: If the prefix is longer than the token length, or not
            alphanumeric, or the seed is negative.
    """

    def __init__(self, prefix: str = "", length: int | None = None, seed: int | None = None):
        settings = get_settings()
        length = settings.token_length if length is None else length
        if len(prefix) > length:
            raise ValueError(f"Prefix {prefix!r} is longer than the token length {length}")
        if prefix and not prefix.isalnum():
            raise ValueError(f"Prefix {prefix!r} must be alphanumeric")
        seed = settings.sequence_seed if seed is None else seed
        if seed < 0:
            raise ValueError(f"Token seed must be >= 0, got {seed}")
        self._prefix = prefix.upper()
        self._length = length
        self._counter = itertools.count(seed)

    @property
    def length(self) -> int:
        return self._length

    def next(self, index: int, context: ResolutionContext) -> str:
        width = self._length - len(self._prefix)
        digits = _base36(next(self._counter))
        if len(digits) > width:
            raise ProviderExhaustedError(
                f"{context.field!r}: {self._length}-character tokens with prefix "
                f"{self._prefix!r} are exhausted"
            )
        return self._prefix + digits.rjust(width, "0")
