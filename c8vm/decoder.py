# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""Instruction fetch and field extraction.

Every Chip-8 instruction is one big-endian 16-bit word. Fields overlap:

    0xCXYN     C   = opcode class (bits 15-12)
                X   = register selector (bits 11-8)
                Y   = register selector (bits 7-4)
                N   = 4-bit immediate (bits 3-0)
                YN  = 8-bit immediate (bits 7-0)
                XYN = 12-bit address (bits 11-0)
"""

from collections import namedtuple

from .errors import MemoryAccessError


def opcode_class(word):
    return word >> 12 & 0x0F


def reg_x(word):
    return word >> 8 & 0x0F


def reg_y(word):
    return word >> 4 & 0x0F


def imm_byte(word):
    return word & 0x00FF


def imm_nibble(word):
    return word & 0x000F


def address(word):
    return word & 0x0FFF


Instruction = namedtuple("Instruction", "word op x y kk n nnn")

# Classes whose behaviour is selected by the low byte or the low nibble
BYTE_SUBCLASSES = (0x0, 0xE, 0xF)
NIBBLE_SUBCLASSES = (0x5, 0x8, 0x9)


def decode(word):
    """Split a 16-bit instruction word into its fields"""
    word &= 0xFFFF
    return Instruction(word, opcode_class(word), reg_x(word), reg_y(word),
                       imm_byte(word), imm_nibble(word), address(word))


def dispatch_key(ins):
    """The (class, sub-field) pair that selects an instruction's handler.

    Classes without sub-opcodes use None as their sub-field.
    """
    if ins.op in BYTE_SUBCLASSES:
        if ins.op == 0x0 and ins.x != 0:
            # 0nnn machine code calls share class 0 with CLS/RET
            return (ins.op, None)
        return (ins.op, ins.kk)
    if ins.op in NIBBLE_SUBCLASSES:
        return (ins.op, ins.n)
    return (ins.op, None)


def fetch(memory, pc):
    """Read the instruction word at pc, first byte in the high half"""
    if pc < 0 or pc >= len(memory) - 1:
        raise MemoryAccessError(pc)
    return memory.read(pc) << 8 | memory.read(pc + 1)


def reg(num):
    return f"V{num:1X}"


def disassemble(word):
    """Render a word as a conventional mnemonic, e.g. 'LD V0, 0xab'"""
    i = decode(word)
    x, y = reg(i.x), reg(i.y)
    if word == 0x00E0:
        return "CLS"
    if word == 0x00EE:
        return "RET"
    if i.op == 0x1:
        return f"JP 0x{i.nnn:03x}"
    if i.op == 0x2:
        return f"CALL 0x{i.nnn:03x}"
    if i.op == 0x3:
        return f"SE {x}, 0x{i.kk:02x}"
    if i.op == 0x4:
        return f"SNE {x}, 0x{i.kk:02x}"
    if i.op == 0x5 and i.n == 0:
        return f"SE {x}, {y}"
    if i.op == 0x6:
        return f"LD {x}, 0x{i.kk:02x}"
    if i.op == 0x7:
        return f"ADD {x}, 0x{i.kk:02x}"
    if i.op == 0x8 and i.n in ALU_MNEMONICS:
        name = ALU_MNEMONICS[i.n]
        if i.n in (0x6, 0xE):
            return f"{name} {x}"
        return f"{name} {x}, {y}"
    if i.op == 0x9 and i.n == 0:
        return f"SNE {x}, {y}"
    if i.op == 0xA:
        return f"LD I, 0x{i.nnn:03x}"
    if i.op == 0xB:
        return f"JP V0, 0x{i.nnn:03x}"
    if i.op == 0xC:
        return f"RND {x}, 0x{i.kk:02x}"
    if i.op == 0xD:
        return f"DRW {x}, {y}, {i.n}"
    if i.op == 0xE and i.kk in (0x9E, 0xA1):
        return f"{'SKP' if i.kk == 0x9E else 'SKNP'} {x}"
    if i.op == 0xF and i.kk in IO_MNEMONICS:
        return IO_MNEMONICS[i.kk].format(x=x)
    return f"DW 0x{word:04x}"


ALU_MNEMONICS = {
    0x0: "LD",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

IO_MNEMONICS = {
    0x07: "LD {x}, DT",
    0x0A: "LD {x}, K",
    0x15: "LD DT, {x}",
    0x18: "LD ST, {x}",
    0x1E: "ADD I, {x}",
    0x29: "LD F, {x}",
    0x33: "LD B, {x}",
    0x55: "LD [I], {x}",
    0x65: "LD {x}, [I]",
}
