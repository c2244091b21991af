"""
UUIDv7 generator following RFC 9562.

=============================================================================
NOTES: Time-ordered identifiers for ebooks
=============================================================================

Layout (128 bits):
- First 48 bits: Unix timestamp in milliseconds
- Next 4 bits: version (0111 = 7)
- Next 12 bits: rand_a, used here as a monotonic counter (RFC 9562 method 1)
- Next 2 bits: variant (10)
- Last 62 bits: random

Ebook ids sort by creation time as plain strings, so storage does not need
a separate timestamp index to list records chronologically.

Within one millisecond the 12-bit counter increments. If the wall clock
goes backwards the last logical timestamp is kept and the counter keeps
counting; when the counter overflows the logical timestamp moves ahead by
one millisecond. Every id from one factory is strictly greater than the
previous one.

RFC 9562: https://www.rfc-editor.org/rfc/rfc9562.html
=============================================================================
"""

import os
import threading
import time
from typing import Callable, Optional
from uuid import UUID

from ..errors import GenerationFailed

_COUNTER_BITS = 12
_COUNTER_MAX = (1 << _COUNTER_BITS) - 1
_TIMESTAMP_MAX = (1 << 48) - 1


class Uuid7Factory:
    """
    Stateful UUIDv7 factory with a per-instance monotonic guarantee.

    The clock and the entropy source are injectable so tests can pin the
    timestamp or simulate an entropy failure.
    """

    def __init__(
        self,
        clock_ms: Optional[Callable[[], int]] = None,
        random_bytes: Optional[Callable[[int], bytes]] = None,
    ) -> None:
        self._clock_ms = clock_ms or (lambda: time.time_ns() // 1_000_000)
        self._random_bytes = random_bytes or os.urandom
        self._lock = threading.Lock()
        self._last_timestamp_ms = -1
        self._counter = 0

    def _next_timestamp_and_counter(self, seed: int) -> tuple:
        now_ms = self._clock_ms()

        if now_ms > self._last_timestamp_ms:
            # New millisecond: restart the counter from a random point in
            # its lower half so there is headroom before overflow.
            self._last_timestamp_ms = now_ms
            self._counter = seed & (_COUNTER_MAX >> 1)
        elif self._counter < _COUNTER_MAX:
            self._counter += 1
        else:
            # Counter exhausted within this logical millisecond.
            self._last_timestamp_ms += 1
            self._counter = seed & (_COUNTER_MAX >> 1)

        if self._last_timestamp_ms > _TIMESTAMP_MAX:
            raise GenerationFailed("UUIDv7 timestamp overflow")

        return self._last_timestamp_ms, self._counter

    def __call__(self) -> UUID:
        """
        Generate the next UUIDv7.

        Raises:
            GenerationFailed: If the entropy source fails or the clock is unusable.
        """
        try:
            random_bytes = self._random_bytes(10)
        except OSError as e:
            raise GenerationFailed(f"entropy source failed: {e}") from e

        if len(random_bytes) < 10:
            raise GenerationFailed(
                f"entropy source returned {len(random_bytes)} bytes, expected 10"
            )

        seed = int.from_bytes(random_bytes[:2], byteorder="big")

        with self._lock:
            timestamp_ms, counter = self._next_timestamp_and_counter(seed)

        if timestamp_ms < 0:
            raise GenerationFailed(f"clock returned a negative timestamp: {timestamp_ms}")

        ts_bytes = timestamp_ms.to_bytes(6, byteorder="big")

        # Byte 6: version (0111) in high nibble + counter high 4 bits
        byte_6 = 0x70 | ((counter >> 8) & 0x0F)

        # Byte 7: counter low 8 bits
        byte_7 = counter & 0xFF

        # Byte 8: variant (10) in high 2 bits + 6 random bits
        byte_8 = 0x80 | (random_bytes[2] & 0x3F)

        # Bytes 9-15: 56 random bits
        rand_b_bytes = random_bytes[3:10]

        return UUID(bytes=ts_bytes + bytes([byte_6, byte_7, byte_8]) + rand_b_bytes)


class Uuid7Generator:
    """
    IdGenerator adapter producing canonical UUIDv7 strings.

    Each generator owns its factory, so ids from one generator are strictly
    increasing.
    """

    def __init__(self, factory: Optional[Uuid7Factory] = None) -> None:
        self._factory = factory or Uuid7Factory()

    def generate(self) -> str:
        """
        Produce a new identifier.

        Raises:
            GenerationFailed: If no id could be produced.
        """
        value = self._factory()

        if value.version != 7:
            raise GenerationFailed(f"generated id has version {value.version}, expected 7")

        return str(value)
