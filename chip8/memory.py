import logging

from chip8.config import C8_FONTS, FONT_START_ADDRESS, MEMORY_SIZE
from chip8.errors import OutOfRange
from chip8.events import Event

log = logging.getLogger(__name__)


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    """
    flat byte addressable store

    every write that changes a cell fires `modified(address, old, new)`,
    every bulk write fires one `range_modified(start, end)` with `end` included
    """
    def __init__(self, size=MEMORY_SIZE):
        self._size = size
        self.inner = bytearray(size)
        self.modified = Event("memory_modified")
        self.range_modified = Event("memory_range_modified")

    @property
    def size(self):
        return self._size

    def __len__(self):
        return self._size

    def __getitem__(self, index):
        if isinstance(index, slice):
            return bytes(self.inner[index])
        return self.read(index)

    def __setitem__(self, key, value):
        self.write(key, value)

    def _check(self, address):
        if not 0 <= address < self._size:
            raise OutOfRange(address, self._size)

    def read(self, address):
        self._check(address)
        return self.inner[address]

    def read_range(self, start, length):
        if length <= 0:
            return b""
        self._check(start)
        self._check(start + length - 1)
        return bytes(self.inner[start:start + length])

    def write(self, address, value):
        self._check(address)
        if not 0 <= value <= 0xFF:
            raise ValueError(f"Memory cells hold a single byte, got {value}")
        old = self.inner[address]
        self.inner[address] = value
        if old != value:
            self.modified.emit(address, old, value)

    def write_range(self, start, data):
        """write `data` starting at `start`, the whole span is checked before anything is written"""
        data = bytes(data)
        if not data:
            return
        end = start + len(data) - 1
        self._check(start)
        self._check(end)
        self.inner[start:end + 1] = data
        self.range_modified.emit(start, end)

    def clear(self):
        self.inner[:] = bytes(self._size)
        self.range_modified.emit(0, self._size - 1)

    def load_font(self, glyphs=None, address=FONT_START_ADDRESS):
        """copy the font glyphs in the interpreter area, the built-in font is used when none is given"""
        glyphs = C8_FONTS if glyphs is None else glyphs
        self.write_range(address, glyphs)
        log.debug("Font of %d bytes loaded at 0x%04x", len(glyphs), address)

    def dump(self):
        return bytes(self.inner)
