# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

## CONSTANTS ##

# Clock speeds used by Chip-8
TIMER_HZ = 60
CYCLE_HZ = 500

TOTAL_RAM = 4096
LOAD_POS = 0x200
# Largest program that fits between LOAD_POS and the end of RAM
MAX_PROGRAM = TOTAL_RAM - LOAD_POS

ADDRESS_MASK = 0x0FFF

# Chip-8 Video display constants
VIDEO_X = 64
VIDEO_Y = 32

REGISTER_COUNT = 16
FLAG_REGISTER = 0xF
STACK_DEPTH = 16
KEY_COUNT = 16

# Chip-8 ROM Font map
FONT_LOAD = 0x50
FONT_HEIGHT = 5
FONT_MAP = [
    0xF0, 0x90, 0x90, 0x90, 0xF0, # 0
    0x20, 0x60, 0x20, 0x20, 0x70, # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0, # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0, # 3
    0x90, 0x90, 0xF0, 0x10, 0x10, # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0, # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0, # 6
    0xF0, 0x10, 0x20, 0x40, 0x40, # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0, # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0, # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90, # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0, # B
    0xF0, 0x80, 0x80, 0x80, 0xF0, # C
    0xE0, 0x90, 0x90, 0x90, 0xE0, # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0, # E
    0xF0, 0x80, 0xF0, 0x80, 0x80  # F
]
