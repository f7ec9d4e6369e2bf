# C8VM, a Chip-8 virtual machine.

# To the extent possible under law, the person who associated CC0 with
# C8VM has waived all copyright and related or neighboring rights
# to C8VM.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

"""pygame driver: window, keypad polling, tone and frame pacing.

The machine itself knows nothing about pygame. This module runs it at
cycle_hz instructions per second, ticks its timers at TIMER_HZ and
paints whatever changed in the display bitmap.
"""

import logging
from array import array

import pygame

from .constants import CYCLE_HZ, TIMER_HZ, TOTAL_RAM
from .decoder import disassemble

log = logging.getLogger(__name__)

# Pixel colors for display
PIXEL_ON = (255,255,255)
PIXEL_OFF = (64,64,64)

# RAM Display constants
RAM_X = 64 # bytes to display per row
RAM_Y = TOTAL_RAM // RAM_X # total rows to display
RAM_RES = 4

# Resolution of fonts used for register display
REG_FONT_RES = 18
REG_FONT_PAD = 10
REG_LINES = 5

# Square wave tone
TONE_HZ = 440
SAMPLE_RATE = 22050
TONE_VOLUME = 4096

# The key map is a little jumbled since the
# Chip-8 has a slightly skewed layout, where
# internal key values are identical to their
# face value in hex.
# Their equivalents are mapped to a grid beginning at key 1 and
# proceeding 4 keys across each row and all the way down

# +-----+-----+-----+-----+
# | 1/1 | 2/2 | 3/3 | C/4 |
# +-----+-----+-----+-----+
# | 4/Q | 5/W | 6/E | D/R |
# +-----+-----+-----+-----+
# | 7/A | 8/S | 9/D | E/F |
# +-----+-----+-----+-----+
# | A/Z | 0/X | B/C | F/V |
# +-----+-----+-----+-----+

KEY_MAP = [
    pygame.K_x, pygame.K_1, pygame.K_2, pygame.K_3,
    pygame.K_q, pygame.K_w, pygame.K_e, pygame.K_a,
    pygame.K_s, pygame.K_d, pygame.K_z, pygame.K_c,
    pygame.K_4, pygame.K_r, pygame.K_f, pygame.K_v
]


def chip_key(host_key):
    """Chip-8 key for a pygame key code, or None if it isn't mapped"""
    try:
        return KEY_MAP.index(host_key)
    except ValueError:
        return None


def square_wave(freq=TONE_HZ, rate=SAMPLE_RATE, volume=TONE_VOLUME):
    """One period of a signed 16-bit square wave"""
    period = max(2, rate // freq)
    half = period // 2
    return array('h', [volume] * half + [-volume] * (period - half))


class Frontend:

    def __init__(self, machine, scale=8, cycle_hz=CYCLE_HZ, monitor=False, mute=False):
        self.machine = machine
        self.scale = scale
        self.cycle_hz = cycle_hz
        self.monitor = monitor
        self.mute = mute
        self.running = False
        self.screen = None
        self.reg_font = None
        self.tone = None
        self.tone_playing = False
        # Cycles owed but not yet run, in units of 1/TIMER_HZ
        self.cycle_credit = 0

        display = machine.display
        self.video_w = display.width * scale
        self.video_h = display.height * scale
        self.reg_h = REG_LINES * REG_FONT_RES + REG_FONT_PAD

    def screen_size(self):
        if not self.monitor:
            return self.video_w, self.video_h
        width = self.video_w + RAM_X * RAM_RES
        height = max(self.video_h + self.reg_h, RAM_Y * RAM_RES)
        return width, height

    def open(self):
        log.info("Initialise display engine")
        pygame.init()
        size = self.screen_size()
        pygame.display.set_caption("C8VM DISPLAY")
        log.info(f"Display mode {size[0]} x {size[1]}")
        self.screen = pygame.display.set_mode(size)
        if self.monitor:
            pygame.font.init()
            self.reg_font = pygame.font.SysFont('Consolas', REG_FONT_RES)
        if not self.mute:
            self.open_audio()

    def open_audio(self):
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as e:
            log.warning(f"No audio device, running muted: {e}")
            self.mute = True
            return
        self.tone = pygame.mixer.Sound(buffer=square_wave())

    def close(self):
        if self.tone is not None:
            self.tone.stop()
        pygame.display.quit()
        pygame.quit()

    def cycles_for_frame(self):
        """Instructions to run this frame, carrying the remainder forward"""
        self.cycle_credit += self.cycle_hz
        n = self.cycle_credit // TIMER_HZ
        self.cycle_credit -= n * TIMER_HZ
        return n

    def run(self):
        """Drive the machine until the window closes or Escape is pressed.

        Machine errors propagate to the caller after the window is closed.
        """
        self.open()
        clock = pygame.time.Clock()
        log.info("Emulation starting")
        self.running = True
        try:
            while self.running:
                self.handle_events()
                for _ in range(self.cycles_for_frame()):
                    self.machine.execute_cycle()
                self.machine.tick()
                self.draw_video()
                if self.monitor:
                    self.display_regs()
                    self.update_ram()
                self.update_sound()
                pygame.display.flip()
                clock.tick(TIMER_HZ)
        finally:
            self.close()
        log.info("Emulation halted")

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                if event.key == pygame.K_ESCAPE:
                    self.running = False
                    continue
                key = chip_key(event.key)
                if key is None:
                    continue
                if event.type == pygame.KEYDOWN:
                    self.machine.press_key(key)
                else:
                    self.machine.release_key(key)

    def draw_cell(self, x, y, lit):
        color = PIXEL_ON if lit else PIXEL_OFF
        s = self.scale
        pygame.draw.rect(self.screen, color, (x*s, y*s, s, s))

    def draw_video(self):
        """Repaint the cells that changed since the last frame"""
        display = self.machine.display
        full, dirty = display.collect_changes()
        if full:
            self.screen.fill(PIXEL_OFF, (0, 0, self.video_w, self.video_h))
            dirty = [(x, y) for y, line in enumerate(display.pixels)
                     for x, lit in enumerate(line) if lit]
        for x, y in dirty:
            self.draw_cell(x, y, display.pixels[y][x])

    def update_ram(self):
        """Paint each written byte of memory as an RGB332 coloured block"""
        memory = self.machine.memory
        full, dirty = memory.collect_changes()
        cells = memory.cells
        for cell in (range(len(cells)) if full else dirty):
            byte = cells[cell]
            col = cell % RAM_X
            row = cell // RAM_X
            r = (byte >> 5 & 0x07) << 5
            g = (byte >> 2 & 0x07) << 5
            b = (byte & 0x03) << 6
            pygame.draw.rect(self.screen, (r,g,b),
                (self.video_w + col*RAM_RES, row*RAM_RES, RAM_RES, RAM_RES))

    def register_lines(self):
        m = self.machine
        lines = []
        for x in range(0, 16, 4):
            lines.append(" ".join(f"V{x+r:1X}: 0x{m.v[x+r]:02x}" for r in range(4)))
        try:
            word = m.memory.read(m.pc) << 8 | m.memory.read(m.pc + 1)
            current = disassemble(word)
        except IndexError:
            current = "--"
        lines.append(f"PC: 0x{m.pc:04x} I: 0x{m.index:03x} DT: {m.delay_timer:3d} "
                     f"ST: {m.sound_timer:3d} {current}")
        return lines

    def display_regs(self):
        # This just blanks the register display.
        top = self.video_h
        self.screen.fill((255,255,255), (0, top, self.video_w, self.reg_h))
        line_off = self.reg_font.size("V")[1]
        for n, text in enumerate(self.register_lines()):
            ts = self.reg_font.render(text, False, (0,0,0))
            self.screen.blit(ts, (0, top + line_off * n))

    def update_sound(self):
        if self.tone is None:
            return
        active = self.machine.is_sound_active()
        if active and not self.tone_playing:
            self.tone.play(loops=-1)
        elif not active and self.tone_playing:
            self.tone.stop()
        self.tone_playing = active
