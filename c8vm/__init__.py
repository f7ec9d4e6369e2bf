# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""C8VM, a Chip-8 virtual machine."""

from .errors import (Chip8Error, MemoryAccessError, ProgramLoadError, StackError,
                     StackOverflowError, StackUnderflowError, UnknownOpcodeError)
from .machine import Machine

__version__ = "0.1.0"

__all__ = [
    "Machine",
    "Chip8Error",
    "MemoryAccessError",
    "ProgramLoadError",
    "StackError",
    "StackOverflowError",
    "StackUnderflowError",
    "UnknownOpcodeError",
]
