"""Small end to end programs run through execute_cycle()."""

from conftest import run


def test_store_program(load):
    """LD V0, 0xab; LD I, 0x00a; LD [I], V0"""
    m = load(0x60AB, 0xA00A, 0xF055)
    run(m, 3)
    assert m.memory.read(0x00A) == 0xAB


def test_read_program(load):
    """LD I, 0x00a; LD V0, 0x00; LD V0, [I]"""
    m = load(0xA00A, 0x6000, 0xF065)
    m.memory.write(0x00A, 0xAB)
    run(m, 3)
    assert m.v[0] == 0xAB


def test_clear_draw_clear(load):
    m = load(0x00E0, 0xA050, 0xD015, 0x00E0)
    run(m, 3)
    assert m.display.lit() > 0
    m.execute_cycle()
    assert all(not any(line) for line in m.display_snapshot())


def test_counting_loop(load):
    """Count V0 up to 5 with a backwards jump"""
    m = load(
        0x6000,  # 200 LD V0, 0
        0x7001,  # 202 ADD V0, 1
        0x3005,  # 204 SE V0, 5
        0x1202,  # 206 JP 0x202
        0x1208,  # 208 JP 0x208
    )
    run(m, 1 + 5 * 3)
    assert m.v[0] == 5
    assert m.pc == 0x208


def test_subroutine_draws_digit(load):
    m = load(
        0x6107,  # 200 LD V1, 7
        0x2208,  # 202 CALL 0x208
        0x1204,  # 204 JP 0x204
        0x0000,  # 206
        0xF129,  # 208 LD F, V1
        0xD005,  # 20a DRW V0, V0, 5
        0x00EE,  # 20c RET
    )
    run(m, 6)
    assert m.sp == 0
    assert m.pc == 0x204
    assert m.index == 0x50 + 5 * 7
    # Top row of "7" is 0xF0
    assert m.display_snapshot()[0][:8] == (1, 1, 1, 1, 0, 0, 0, 0)


def test_bcd_then_read_back(load):
    m = load(0x6A9C, 0xA300, 0xFA33, 0xF265)
    run(m, 4)
    assert m.v[:3] == [1, 5, 6]
