import pytest

from c8vm.errors import MemoryAccessError
from c8vm.keypad import Keypad
from c8vm.memory import Memory


def test_memory_starts_zeroed():
    mem = Memory()
    assert len(mem) == 4096
    assert mem.read_block(0, 4096) == bytes(4096)


def test_write_truncates_to_byte():
    mem = Memory()
    mem.write(0x300, 0x1AB)
    assert mem.read(0x300) == 0xAB


@pytest.mark.parametrize("address", [-1, 4096, 0x2000])
def test_out_of_range_byte(address):
    mem = Memory()
    with pytest.raises(MemoryAccessError):
        mem.read(address)
    with pytest.raises(MemoryAccessError):
        mem.write(address, 1)


def test_block_past_end_is_rejected_whole():
    mem = Memory()
    with pytest.raises(MemoryAccessError) as exc:
        mem.write_block(0xFFE, b"\x01\x02\x03")
    assert exc.value.address == 0x1000
    # Nothing was written
    assert mem.read_block(0xFFE, 2) == b"\x00\x00"


def test_memory_access_error_is_index_error():
    with pytest.raises(IndexError):
        Memory().read_block(0xFFF, 2)


def test_clear():
    mem = Memory()
    mem.write_block(0x200, b"\xff" * 16)
    mem.clear()
    assert mem.read_block(0x200, 16) == bytes(16)


def test_keypad_press_release():
    pad = Keypad()
    assert pad.first_pressed() is None
    pad.press(0xB)
    pad.press(0x3)
    assert pad.is_pressed(0xB)
    assert pad.first_pressed() == 0x3
    pad.release(0x3)
    assert pad.first_pressed() == 0xB


def test_keypad_uses_low_nibble():
    pad = Keypad()
    pad.press(0x5)
    assert pad.is_pressed(0x25)


def test_keypad_rejects_bad_key():
    with pytest.raises(ValueError):
        Keypad().press(16)


def test_change_tracking():
    mem = Memory()
    full, dirty = mem.collect_changes()
    assert full
    mem.write(0x300, 1)
    mem.write_block(0x400, b"\x01\x02")
    assert mem.collect_changes() == (False, {0x300, 0x400, 0x401})
    assert mem.collect_changes() == (False, set())
    mem.clear()
    assert mem.collect_changes() == (True, set())
