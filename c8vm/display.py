# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

from .constants import VIDEO_X, VIDEO_Y


class Display:
    """Monochrome bitmap, one int (0 or 1) per cell, indexed [y][x].

    Cells changed since the presentation layer last collected them are
    kept in `dirty` so it only has to redraw what moved.
    """

    def __init__(self, width=VIDEO_X, height=VIDEO_Y):
        self.width = width
        self.height = height
        self.pixels = [[0] * width for _ in range(height)]
        self.dirty = set()
        self.cleared = True

    def clear(self):
        self.pixels = [[0] * self.width for _ in range(self.height)]
        self.dirty.clear()
        # A full redraw is cheaper than tracking every cell
        self.cleared = True

    def draw_sprite(self, x, y, rows):
        """XOR an 8-pixel wide sprite into the bitmap at (x, y).

        Each byte of rows is one sprite row, most significant bit on the
        left. Coordinates wrap around both edges. Returns True if any
        lit cell was turned off (a collision).
        """
        collision = False
        for row, byte in enumerate(rows):
            y_off = (y + row) % self.height
            line = self.pixels[y_off]
            for col in range(8):
                if not byte >> (7 - col) & 0x1:
                    continue
                x_off = (x + col) % self.width
                if line[x_off]:
                    collision = True
                line[x_off] ^= 1
                self.dirty.add((x_off, y_off))
        return collision

    def collect_changes(self):
        """Return (full_redraw, dirty cells) and reset change tracking"""
        changes = (self.cleared, self.dirty)
        self.cleared = False
        self.dirty = set()
        return changes

    def snapshot(self):
        return tuple(tuple(line) for line in self.pixels)

    def lit(self):
        return sum(sum(line) for line in self.pixels)
