# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""The Chip-8 machine state and its boundary operations.

A Machine owns everything the interpreter mutates: main memory, the
V0-VF register block, the index register, the program counter, the
call stack, both timers, the display bitmap and the keypad. Nothing is
shared between instances, so several machines can run side by side.

Memory map:

    0x000-0x1FF  interpreter reserved (font glyphs at 0x050-0x09F)
    0x200-0xFFF  program and work RAM
"""

import logging
import random

from . import executor
from .constants import (ADDRESS_MASK, FONT_LOAD, FONT_MAP, LOAD_POS, MAX_PROGRAM,
                        REGISTER_COUNT, STACK_DEPTH, TOTAL_RAM)
from .display import Display
from .errors import ProgramLoadError, StackOverflowError, StackUnderflowError
from .keypad import Keypad
from .memory import Memory

log = logging.getLogger(__name__)


class Machine:

    def __init__(self, strict=True, rng=None):
        # strict: unknown opcodes raise instead of being skipped
        self.strict = strict
        self.rng = rng if rng is not None else random.Random()
        self.memory = Memory(TOTAL_RAM)
        self.display = Display()
        self.keypad = Keypad()
        self.init()

    def init(self):
        """Zero all state, install the font and point pc at the load address"""
        self.memory.clear()
        self.memory.write_block(FONT_LOAD, FONT_MAP)
        log.debug(f"Fonts loaded to {FONT_LOAD:04x}")
        self.v = [0] * REGISTER_COUNT
        self._index = 0
        self.pc = LOAD_POS
        self.stack = [0] * STACK_DEPTH
        self.sp = 0
        self.delay_timer = 0
        self.sound_timer = 0
        self.cycles = 0
        self.display.clear()
        self.keypad.reset()
        log.debug(f"Register PC initialised to 0x{self.pc:04x}")

    @property
    def index(self):
        return self._index

    @index.setter
    def index(self, value):
        self._index = value & ADDRESS_MASK

    def load_program(self, data):
        """Copy a program image into memory at the load address"""
        data = bytes(data)
        room = MAX_PROGRAM
        if len(data) > room:
            raise ProgramLoadError(
                f"Program is too large: {len(data)} bytes, {room} available")
        self.memory.write_block(LOAD_POS, data)
        log.info(f"Program length {len(data)} bytes loaded at 0x{LOAD_POS:04x}")

    def execute_cycle(self):
        """Fetch, decode and execute the instruction at pc"""
        executor.step(self)
        self.cycles += 1

    def tick(self):
        """Count both timers down by one; call at TIMER_HZ"""
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def display_snapshot(self):
        return self.display.snapshot()

    def is_sound_active(self):
        return self.sound_timer > 0

    def press_key(self, key):
        self.keypad.press(key)

    def release_key(self, key):
        self.keypad.release(key)

    # sp counts entries in use, 0 (empty) through STACK_DEPTH (full)
    def push(self, address):
        if self.sp >= len(self.stack):
            raise StackOverflowError(self.pc)
        self.stack[self.sp] = address
        self.sp += 1

    def pop(self):
        if self.sp <= 0:
            raise StackUnderflowError(self.pc)
        self.sp -= 1
        return self.stack[self.sp]

    def __repr__(self):
        regs = " ".join(f"V{n:1X}={value:02x}" for n, value in enumerate(self.v))
        return (f"<Machine pc={self.pc:04x} I={self.index:03x} sp={self.sp} "
                f"DT={self.delay_timer} ST={self.sound_timer} {regs}>")
