# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

from .constants import KEY_COUNT


class Keypad:
    """State of the 16-key hexadecimal keypad.

    The machine only reads this; an input collaborator calls press()
    and release() as host keys go down and up.
    """

    def __init__(self):
        self.keys = [False] * KEY_COUNT

    def _check(self, key):
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Invalid key {key!r}")

    def press(self, key):
        self._check(key)
        self.keys[key] = True

    def release(self, key):
        self._check(key)
        self.keys[key] = False

    def reset(self):
        self.keys = [False] * KEY_COUNT

    def is_pressed(self, key):
        # Only the low nibble of a register selects a key
        return self.keys[key & 0x0F]

    def first_pressed(self):
        """Lowest numbered key currently held, or None"""
        for key, down in enumerate(self.keys):
            if down:
                return key
        return None
