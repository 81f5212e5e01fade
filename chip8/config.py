# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# COMPATIBILITY QUIRKS TABLE
# https://games.gulrak.net/cadmium/chip8-opcode-table.html#quirk6
#
# MASTERING CHIP-8
# https://github.com/mattmikolay/chip-8/wiki/Mastering-CHIP%E2%80%908

import os
from enum import Enum


# ******************** MEMORY
MEMORY_SIZE = 4096
FONT_START_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5         # each character font is made of 5 bytes
ROM_START_ADDRESS = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - ROM_START_ADDRESS
STACK_SIZE = 16
REGISTER_COUNT = 16

C8_FONTS = [0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80]  # F
FONT_SIZE = len(C8_FONTS)


# ******************** TIMING
OSCILLATOR_FREQUENCY = 60   # Hz, drives the timers and the display refresh
SPEED_SLOW = 240
SPEED_NORMAL = 480
SPEED_FAST = 960
SPEEDS = {
    "slow": SPEED_SLOW,
    "normal": SPEED_NORMAL,
    "fast": SPEED_FAST,
}


# ******************** DISPLAY
SCREEN_HEIGHT = 32
SCREEN_WIDTH = 64
SCREEN_RESOLUTION = (SCREEN_WIDTH, SCREEN_HEIGHT)
SCALE = 15
BLUE = (80, 69, 155)
LIGHT_BLUE = (136, 126, 203)
AMBER = (255, 176, 0)
GREEN = (51, 255, 51)
WHITE = (255, 255, 255)
FOREGROUND_COLORS = {
    "light-blue": LIGHT_BLUE,
    "amber": AMBER,
    "green": GREEN,
    "white": WHITE,
}


# ******************** SOUND
BUZZER_FREQUENCY = 736      # Hz of the generated square wave when no sound file is set


# ******************** DEBUG
DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False


# ******************** BEHAVIOUR SWITCHES
class Option(Enum):
    CLEAR_SCREEN_ON_RESET = "clear-screen-on-reset"
    MODIFY_I_ON_FX55_AND_FX65 = "modify-i-on-fx55-and-fx65"     # compatibility quirk 6


DEFAULT_OPTIONS = {
    Option.CLEAR_SCREEN_ON_RESET: True,
    Option.MODIFY_I_ON_FX55_AND_FX65: False,
}
