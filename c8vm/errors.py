# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""Fatal conditions raised by the machine.

Nothing in the core catches these; the driver decides whether to stop,
reset the machine or carry on.
"""


class Chip8Error(Exception):
    """Base class for every fatal machine condition."""


class ProgramLoadError(Chip8Error):
    """The program image does not fit in memory or could not be read."""


class StackError(Chip8Error):
    pass


class StackOverflowError(StackError):
    def __init__(self, address):
        super().__init__(f"Stack overflow calling from {address:04x}")
        self.address = address


class StackUnderflowError(StackError):
    def __init__(self, address):
        super().__init__(f"Stack underflow returning from {address:04x}")
        self.address = address


class UnknownOpcodeError(Chip8Error):
    def __init__(self, word, address):
        super().__init__(f"Undefined opcode {word:04x} at address {address:04x}")
        self.word = word
        self.address = address


class MemoryAccessError(Chip8Error, IndexError):
    def __init__(self, address):
        super().__init__(f"Memory access error at {address:04x}")
        self.address = address
