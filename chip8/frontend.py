import logging
import os
from array import array

os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_0, K_1, K_2, K_3,
    K_4, K_5, K_6, K_7,
    K_8, K_9, K_a, K_b,
    K_c, K_d, K_e, K_f,
)

from chip8.config import BLUE, BUZZER_FREQUENCY, LIGHT_BLUE, OSCILLATOR_FREQUENCY, SCALE, SCREEN_HEIGHT, SCREEN_WIDTH
from chip8.devices import Buzzer, Framebuffer
from chip8.oscillator import TickSource

log = logging.getLogger(__name__)

KEY_MAPPINGS = {
    K_0: 0x0,
    K_1: 0x1,
    K_2: 0x2,
    K_3: 0x3,
    K_4: 0x4,
    K_5: 0x5,
    K_6: 0x6,
    K_7: 0x7,
    K_8: 0x8,
    K_9: 0x9,
    K_a: 0xA,
    K_b: 0xB,
    K_c: 0xC,
    K_d: 0xD,
    K_e: 0xE,
    K_f: 0xF,
}


# ******************** I/O SECTION
class Screen(Framebuffer):
    """
    framebuffer drawn on a pygame window, one square of `scale` pixels per CHIP-8 pixel
    the change won't be immediatly visible because it'll require a call to refresh
    """
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE, surface=None):
        self.scale = s
        self.background = pygame.Color(bg_color)
        self.surface = surface if surface is not None else pygame.display.set_mode((w * s, h * s))
        super().__init__(w, h, fg_color)
        self.surface.fill(self.background)

    @property
    def foreground_color(self):
        return self._foreground

    @foreground_color.setter
    def foreground_color(self, color):
        self._foreground = pygame.Color(color)
        # already lit pixels take the new color at once
        if hasattr(self, "buffer"):
            self.redraw()

    def _draw(self, x, y, on):
        pygame.draw.rect(
            self.surface,
            self._foreground if on else self.background,
            (x * self.scale, y * self.scale, self.scale, self.scale)
        )

    def set_pixel(self, x, y, on):
        super().set_pixel(x, y, on)
        self._draw(x, y, on)

    def clear(self):
        super().clear()
        self.surface.fill(self.background)

    def redraw(self):
        self.surface.fill(self.background)
        for offset, on in enumerate(self.buffer):
            if on:
                self._draw(offset % self.width, offset // self.width, True)

    def refresh(self):
        pygame.display.flip()


class MixerBuzzer(Buzzer):
    """plays the sound file at `sound_path` in a loop, or a square wave when no file is set"""
    def __init__(self, sound_path=None, frequency=BUZZER_FREQUENCY):
        super().__init__(None)
        self.frequency = frequency
        self.sound = None
        self.playing = False
        if sound_path is not None:
            self.sound_path = sound_path

    @Buzzer.sound_path.setter
    def sound_path(self, value):
        was_playing = self.playing
        self.stop()
        self._sound_path = value
        self.sound = None
        if was_playing:
            self.play()

    def _square_wave(self):
        # modified from: https://gist.github.com/ohsqueezy/6540433
        rate, size, _ = pygame.mixer.get_init()
        period = int(round(rate / self.frequency))
        amplitude = 2 ** (abs(size) - 1) - 1
        samples = array("h", [amplitude if t < period / 2 else -amplitude for t in range(period)])
        return pygame.mixer.Sound(buffer=samples)

    def _load(self):
        if pygame.mixer.get_init() is None:
            pygame.mixer.init(channels=1)
        if self._sound_path is not None:
            return pygame.mixer.Sound(self._sound_path)
        return self._square_wave()

    def play(self):
        if self.sound is None:
            try:
                self.sound = self._load()
            except pygame.error as err:
                log.warning("Buzzer disabled: %s", err)
                return
        self.sound.play(loops=-1)
        self.playing = True

    def stop(self):
        if self.sound is not None:
            self.sound.stop()
        self.playing = False


class PygameTickSource(TickSource):
    """fires the scheduled callback from the pygame main loop, `clock.tick` keeps the pace"""
    def __init__(self):
        super().__init__()
        self.clock = pygame.time.Clock()

    def wait(self):
        """sleep until the next tick is due and fire it"""
        self.clock.tick(self.frequency or OSCILLATOR_FREQUENCY)
        if self.callback is not None:
            self.callback()


class Frontend:
    """
    window, keyboard and sound around a computer
    Escape quits, Space starts or stops, F10 runs a single cycle, F5 warm resets, F6 cold resets
    """
    def __init__(self, computer, tick_source):
        self.computer = computer
        self.tick_source = tick_source
        self.running = False
        computer.oscillator.emulation_halted.subscribe(self.on_emulation_halted)
        computer.oscillator.cycle_stepped.subscribe(self.on_cycle_stepped)

    def on_emulation_halted(self, err, pc):
        log.error("********** THE EMULATOR HALTED AT 0x%04x WITH THE FOLLOWING STATE\n%s", pc, self.computer)

    def on_cycle_stepped(self):
        log.info("Execution cycle completed. The CHIP-8 has stopped.\n%s", self.computer)

    def toggle(self):
        oscillator = self.computer.oscillator
        if oscillator.emulation_started:
            self.computer.stop()
        else:
            self.computer.start()

    def single_step(self):
        oscillator = self.computer.oscillator
        oscillator.monostable = True
        oscillator.start()

    def handle(self, event):
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                self.running = False
            elif event.key == pygame.K_SPACE:
                self.computer.oscillator.monostable = False
                self.toggle()
            elif event.key == pygame.K_F10:
                self.single_step()
            elif event.key == pygame.K_F5:
                self.computer.restart()
            elif event.key == pygame.K_F6:
                self.computer.power_cycle()
            elif event.key in KEY_MAPPINGS:
                self.computer.keypad.press(KEY_MAPPINGS[event.key])     # register keypress
        elif event.type == pygame.KEYUP and event.key in KEY_MAPPINGS:
            self.computer.keypad.release(KEY_MAPPINGS[event.key])

    def run(self):
        self.running = True
        while self.running:
            # loop throught the event queue
            for event in pygame.event.get():
                self.handle(event)
            # stopped oscillators leave the schedule empty, keep the window responsive anyway
            if not self.tick_source.scheduled:
                self.tick_source.clock.tick(OSCILLATOR_FREQUENCY)
                continue
            self.tick_source.wait()
