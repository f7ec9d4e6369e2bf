# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""Opcode dispatch and the handlers for each instruction.

Handlers take the machine and the decoded instruction. They return the
new program counter when they set it themselves (jumps, calls, skips,
key waits) and None to fall through to the next word.
"""

import logging

from .constants import ADDRESS_MASK, FLAG_REGISTER, FONT_HEIGHT, FONT_LOAD
from .decoder import decode, disassemble, dispatch_key, fetch
from .errors import UnknownOpcodeError

log = logging.getLogger(__name__)

VF = FLAG_REGISTER


def ins_cls(m, i):
    """00E0 CLS - Clear the screen"""
    m.display.clear()


def ins_ret(m, i):
    """00EE RET - Return from subroutine"""
    return m.pop()


def ins_jmp(m, i):
    """1nnn JP nnn - Jump to instruction nnn"""
    return i.nnn


def ins_call(m, i):
    """2nnn CALL nnn - Call subroutine at nnn"""
    m.push(m.pc + 2)
    return i.nnn


def ins_jmp_v0(m, i):
    """Bnnn JP V0, nnn"""
    return (i.nnn + m.v[0]) & ADDRESS_MASK


def skip_if(m, condition):
    if condition:
        return m.pc + 4
    return m.pc + 2


def ins_skipim(m, i):
    """3xkk SE Vx, kk"""
    return skip_if(m, m.v[i.x] == i.kk)


def ins_skipim_ne(m, i):
    """4xkk SNE Vx, kk"""
    return skip_if(m, m.v[i.x] != i.kk)


def ins_skipreg(m, i):
    """5xy0 SE Vx, Vy"""
    return skip_if(m, m.v[i.x] == m.v[i.y])


def ins_skipreg_ne(m, i):
    """9xy0 SNE Vx, Vy"""
    return skip_if(m, m.v[i.x] != m.v[i.y])


def ins_load(m, i):
    """6xkk LD Vx, kk"""
    m.v[i.x] = i.kk


def ins_add(m, i):
    """7xkk ADD Vx, kk - no carry flag"""
    m.v[i.x] = (m.v[i.x] + i.kk) & 0xFF


# ALU ops write Vx first and VF last, so 8Fyn leaves the flag in VF.

def alu_mov(m, i):
    m.v[i.x] = m.v[i.y]


def alu_or(m, i):
    m.v[i.x] |= m.v[i.y]


def alu_and(m, i):
    m.v[i.x] &= m.v[i.y]


def alu_xor(m, i):
    m.v[i.x] ^= m.v[i.y]


def alu_add(m, i):
    # ADD Vx, Vy, set carry flag if > 255. Truncate to 8 bits.
    result = m.v[i.x] + m.v[i.y]
    m.v[i.x] = result & 0xFF
    m.v[VF] = 1 if result > 0xFF else 0


def alu_sub(m, i):
    # SUB Vx, Vy. VF is NOT borrow: set when Vx >= Vy.
    vx, vy = m.v[i.x], m.v[i.y]
    m.v[i.x] = (vx - vy) & 0xFF
    m.v[VF] = 1 if vx >= vy else 0


def alu_shr(m, i):
    vx = m.v[i.x]
    m.v[i.x] = vx >> 1
    m.v[VF] = vx & 0x1


def alu_subn(m, i):
    vx, vy = m.v[i.x], m.v[i.y]
    m.v[i.x] = (vy - vx) & 0xFF
    m.v[VF] = 1 if vy >= vx else 0


def alu_shl(m, i):
    vx = m.v[i.x]
    m.v[i.x] = (vx << 1) & 0xFF
    m.v[VF] = vx >> 7 & 0x1


def ins_loadi(m, i):
    """Annn LD I, nnn"""
    m.index = i.nnn


def ins_rnd(m, i):
    """Cxkk RND Vx, kk"""
    m.v[i.x] = m.rng.randint(0, 255) & i.kk


def ins_draw(m, i):
    """Dxyn DRW Vx, Vy, n - Draw an n-row sprite from [I] at (Vx, Vy)"""
    rows = m.memory.read_block(m.index, i.n)
    collided = m.display.draw_sprite(m.v[i.x], m.v[i.y], rows)
    m.v[VF] = 1 if collided else 0


def ins_skipkey(m, i):
    """Ex9E SKP Vx"""
    return skip_if(m, m.keypad.is_pressed(m.v[i.x]))


def ins_skipnokey(m, i):
    """ExA1 SKNP Vx"""
    return skip_if(m, not m.keypad.is_pressed(m.v[i.x]))


def io_get_delay(m, i):
    m.v[i.x] = m.delay_timer


def io_wait_key(m, i):
    """Fx0A LD Vx, K - Halt until a key is down, store it in Vx.

    Nothing blocks: with no key held the pc stays put and the same
    instruction runs again next cycle, so timers keep counting.
    """
    key = m.keypad.first_pressed()
    if key is None:
        return m.pc
    m.v[i.x] = key


def io_set_delay(m, i):
    m.delay_timer = m.v[i.x]


def io_set_sound(m, i):
    m.sound_timer = m.v[i.x]


def io_add_index(m, i):
    m.index = m.index + m.v[i.x]


def io_font(m, i):
    m.index = FONT_LOAD + FONT_HEIGHT * (m.v[i.x] & 0x0F)


def io_bcd(m, i):
    value = m.v[i.x]
    m.memory.write_block(m.index, (value // 100, value // 10 % 10, value % 10))


def io_store(m, i):
    """Fx55 LD [I], Vx - Store V0 through Vx inclusive at [I]"""
    m.memory.write_block(m.index, m.v[:i.x + 1])


def io_read(m, i):
    """Fx65 LD Vx, [I] - Read V0 through Vx inclusive from [I]"""
    m.v[:i.x + 1] = m.memory.read_block(m.index, i.x + 1)


# (class, sub-field) -> handler, see decoder.dispatch_key
OPCODES = {
    (0x0, 0xE0): ins_cls,
    (0x0, 0xEE): ins_ret,
    (0x1, None): ins_jmp,
    (0x2, None): ins_call,
    (0x3, None): ins_skipim,
    (0x4, None): ins_skipim_ne,
    (0x5, 0x0): ins_skipreg,
    (0x6, None): ins_load,
    (0x7, None): ins_add,
    (0x8, 0x0): alu_mov,
    (0x8, 0x1): alu_or,
    (0x8, 0x2): alu_and,
    (0x8, 0x3): alu_xor,
    (0x8, 0x4): alu_add,
    (0x8, 0x5): alu_sub,
    (0x8, 0x6): alu_shr,
    (0x8, 0x7): alu_subn,
    (0x8, 0xE): alu_shl,
    (0x9, 0x0): ins_skipreg_ne,
    (0xA, None): ins_loadi,
    (0xB, None): ins_jmp_v0,
    (0xC, None): ins_rnd,
    (0xD, None): ins_draw,
    (0xE, 0x9E): ins_skipkey,
    (0xE, 0xA1): ins_skipnokey,
    (0xF, 0x07): io_get_delay,
    (0xF, 0x0A): io_wait_key,
    (0xF, 0x15): io_set_delay,
    (0xF, 0x18): io_set_sound,
    (0xF, 0x1E): io_add_index,
    (0xF, 0x29): io_font,
    (0xF, 0x33): io_bcd,
    (0xF, 0x55): io_store,
    (0xF, 0x65): io_read,
}


def step(m):
    """Run one fetch-decode-execute cycle against machine m.

    A raised error leaves pc on the faulting instruction.
    """
    pc = m.pc
    word = fetch(m.memory, pc)
    i = decode(word)
    if log.isEnabledFor(logging.DEBUG):
        log.debug(f"{pc:04x} | OP 0x{word:04x} - {disassemble(word)}")

    handler = OPCODES.get(dispatch_key(i))
    if handler is None:
        if m.strict:
            raise UnknownOpcodeError(word, pc)
        log.warning(f"{pc:04x} | OP 0x{word:04x} - Unimplemented, skipped")
        m.pc = (pc + 2) & 0xFFFF
        return

    new_pc = handler(m, i)
    m.pc = (pc + 2) & 0xFFFF if new_pc is None else new_pc & 0xFFFF
