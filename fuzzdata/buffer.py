# SPDX-License-Identifier: GPL-3.0-or-later OR LicenseRef-Commercial
"""Read-only byte view consumed from both ends.

The front cursor grows upward from offset 0 and serves blob reads; the back
cursor shrinks downward from the end and serves scalar reads. The two never
cross, so `front <= back` holds after every call.
"""

from __future__ import annotations


class Buffer:
    """Zero-copy view over fuzzer input with a front and a back cursor."""

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = memoryview(data).toreadonly()
        if self._data.ndim != 1 or self._data.format != "B":
            self._data = self._data.cast("B")
        self._front = 0
        self._back = len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    @property
    def front(self) -> int:
        """Offset of the next byte handed out by front reads."""
        return self._front

    @property
    def back(self) -> int:
        """Exclusive end of the bytes still available to back reads."""
        return self._back

    @property
    def remaining(self) -> int:
        """Bytes left between the two cursors."""
        return self._back - self._front

    def read_front(self, size: int) -> memoryview:
        """Return up to `size` bytes from the front and advance the cursor.

        The returned view aliases the input; callers copy what they keep.
        """
        end = self._front + min(size, self.remaining)
        chunk = self._data[self._front : end]
        self._front = end
        return chunk

    def pop_front(self) -> int | None:
        """Take one byte from the front, or None when exhausted."""
        if self._front == self._back:
            return None
        byte = self._data[self._front]
        self._front += 1
        return byte

    def pop_back(self) -> int | None:
        """Take one byte from the back, or None when exhausted."""
        if self._front == self._back:
            return None
        self._back -= 1
        return self._data[self._back]
