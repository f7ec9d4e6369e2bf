# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

import logging

from .constants import TOTAL_RAM
from .errors import MemoryAccessError

log = logging.getLogger(__name__)


def c_alloc(n):
    """Allocate n byte array as memory"""
    return bytearray(n)


class Memory:
    """Flat, bounds-checked main memory.

    Every byte written is truncated to 8 bits. Any address outside
    0..size-1 raises MemoryAccessError rather than wrapping.
    """

    def __init__(self, size=TOTAL_RAM):
        self.size = size
        self.cells = c_alloc(size)
        # Addresses written since the last collect_changes()
        self.dirty = set()
        self.cleared = True

    def __len__(self):
        return self.size

    def _check(self, address, n=1):
        if address < 0 or address + n > self.size:
            # Report the first byte that actually falls outside memory
            bad = address if address < 0 else max(address, self.size)
            raise MemoryAccessError(bad)

    def clear(self):
        self.cells[:] = c_alloc(self.size)
        self.dirty.clear()
        self.cleared = True

    def read(self, address):
        self._check(address)
        return self.cells[address]

    def write(self, address, value):
        self._check(address)
        self.cells[address] = value & 0xFF
        self.dirty.add(address)

    def read_block(self, address, n):
        self._check(address, n)
        return bytes(self.cells[address:address + n])

    def write_block(self, address, data):
        """Copy data into memory starting at address"""
        data = bytes(data)
        self._check(address, len(data))
        self.cells[address:address + len(data)] = data
        self.dirty.update(range(address, address + len(data)))
        log.debug(f"Wrote {len(data)} bytes at {address:04x}")

    def collect_changes(self):
        """Return (full_redraw, written addresses) and reset change tracking"""
        changes = (self.cleared, self.dirty)
        self.cleared = False
        self.dirty = set()
        return changes
