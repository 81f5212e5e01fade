import logging
import os

from chip8.config import (
    DEFAULT_OPTIONS, FONT_SIZE, MAX_PROGRAM_SIZE, OSCILLATOR_FREQUENCY, ROM_START_ADDRESS, SPEED_NORMAL, Option,
)
from chip8.devices import Framebuffer, Keypad, SilentBuzzer
from chip8.disassembler import disassemble
from chip8.errors import ProgramTooLarge
from chip8.memory import Memory
from chip8.oscillator import Oscillator
from chip8.processor import Processor

log = logging.getLogger(__name__)


class ComputerView:
    """
    read-only window over a computer for inspectors such as memory viewers or disassemblers,
    everything it hands out is a copy or an immutable value
    """
    def __init__(self, computer):
        self._computer = computer
        self._handlers = {}

    @property
    def memory_size(self):
        return self._computer.memory.size

    def read(self, address):
        return self._computer.memory.read(address)

    def read_range(self, start, length):
        return self._computer.memory.read_range(start, length)

    def memory(self):
        return self._computer.memory.dump()

    def processor(self):
        return self._computer.processor.snapshot()

    @property
    def pc(self):
        return self._computer.processor.pc

    @property
    def catalog(self):
        return self._computer.processor.catalog

    @property
    def program_path(self):
        return self._computer.program_path

    @property
    def state(self):
        return self._computer.oscillator.state

    @property
    def fault(self):
        return self._computer.oscillator.fault

    def disassemble(self, start=ROM_START_ADDRESS, end=None):
        return disassemble(self, start, end)

    # ********** NOTIFICATIONS
    def _event(self, name):
        events = {
            "memory_modified": self._computer.memory.modified,
            "memory_range_modified": self._computer.memory.range_modified,
            "emulation_halted": self._computer.oscillator.emulation_halted,
            "cycle_stepped": self._computer.oscillator.cycle_stepped,
        }
        if name not in events:
            raise ValueError(f"Unknown event {name!r}, expected one of {', '.join(events)}")
        return events[name]

    def subscribe(self, name, handler):
        """handler is called with this view first, then the arguments of the event"""
        event = self._event(name)
        if (name, handler) not in self._handlers:
            self._handlers[(name, handler)] = event.subscribe(lambda *args: handler(self, *args))
        return handler

    def unsubscribe(self, name, handler):
        wrapper = self._handlers.pop((name, handler), None)
        if wrapper is not None:
            self._event(name).unsubscribe(wrapper)


class Computer:
    """
    owns memory, processor and oscillator
    display, buzzer and keypad are supplied from outside and only referenced
    """
    def __init__(self, display=None, buzzer=None, keypad=None, tick_source=None,
                 frequency=OSCILLATOR_FREQUENCY, speed=SPEED_NORMAL, rng=None):
        self.display = display if display is not None else Framebuffer()
        self.buzzer = buzzer if buzzer is not None else SilentBuzzer()
        self.keypad = keypad if keypad is not None else Keypad()
        self.options = dict(DEFAULT_OPTIONS)
        self.memory = Memory()
        self.processor = Processor(self.memory, self.display, self.keypad, self.buzzer,
                                   options=self.options, rng=rng, speed=speed)
        self.oscillator = Oscillator(self.processor, frequency, tick_source)
        self._program_path = None
        self._program_image = b""
        self._font_path = None
        self._font = None
        self.memory.load_font()

    # ********** OPTIONS
    def set_option_flag(self, option, value):
        self.options[Option(option)] = bool(value)
        log.debug("Option %s set to %s", option, bool(value))

    def get_option_flag(self, option):
        return self.options[Option(option)]

    # ********** PROGRAM AND FONT
    @property
    def program_path(self):
        return self._program_path

    @program_path.setter
    def program_path(self, path):
        self.load_program(path)

    @property
    def font_path(self):
        return self._font_path

    @font_path.setter
    def font_path(self, path):
        """load a font file in the interpreter area, it survives both kinds of reset"""
        with open(path, mode='rb') as f:
            font = f.read()
        if len(font) != FONT_SIZE:
            raise ValueError(f"A font file holds {FONT_SIZE} bytes, {path} has {len(font)}")
        self._font_path = path
        self._font = font
        self.memory.load_font(font)
        log.info("Font %s loaded", os.path.basename(path))

    def load_program(self, path):
        """load ROM file from user specified path and cold reset the computer"""
        with open(path, mode='rb') as f:
            rom = f.read()
        self.load_image(rom, path)
        log.info("The ROM at path %s has been loaded successfully", path)

    def load_image(self, image, path=None):
        image = bytes(image)
        if len(image) > MAX_PROGRAM_SIZE:
            raise ProgramTooLarge(len(image), MAX_PROGRAM_SIZE)
        self._program_image = image
        self._program_path = path
        self.power_cycle(image)

    def _read_program(self):
        if self._program_path is None:
            return self._program_image
        with open(self._program_path, mode='rb') as f:
            rom = f.read()
        if len(rom) > MAX_PROGRAM_SIZE:
            raise ProgramTooLarge(len(rom), MAX_PROGRAM_SIZE)
        return rom

    # ********** RESETS
    def power_cycle(self, image=None):
        """cold reset: memory wiped, font and program reloaded, oscillator stopped"""
        # the program is read before anything is touched, a failed read leaves the machine as it was
        if image is None:
            image = self._read_program()
        self.oscillator.reset()
        self.memory.clear()
        self.memory.load_font(self._font)
        self.memory.write_range(ROM_START_ADDRESS, image)
        self.processor.reset()
        self.keypad.clear()
        if self.options[Option.CLEAR_SCREEN_ON_RESET]:
            self.display.clear()
        log.debug("Cold reset done")

    def restart(self):
        """warm reset: registers and program reloaded, the rest of memory is kept"""
        image = self._read_program()
        self.processor.reset()
        self.memory.write_range(ROM_START_ADDRESS, image)
        self.oscillator.clear_halt()
        if self.options[Option.CLEAR_SCREEN_ON_RESET]:
            self.display.clear()
        log.debug("Warm reset done")

    # ********** EMULATION
    def start(self):
        self.oscillator.start()

    def stop(self):
        self.oscillator.stop()

    def view(self):
        return ComputerView(self)

    def __str__(self):
        return f"{self.processor}\nSTATE:{self.oscillator.state.value}"
