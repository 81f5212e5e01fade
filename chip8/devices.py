from chip8.config import LIGHT_BLUE, SCREEN_HEIGHT, SCREEN_WIDTH


# ******************** DISPLAY
# Framebuffer and SilentBuzzer are the in-memory sinks used headless
class Display:
    width = SCREEN_WIDTH
    height = SCREEN_HEIGHT

    def __init__(self, fg_color=LIGHT_BLUE):
        self.foreground_color = fg_color

    def clear(self):
        raise NotImplementedError

    def get_pixel(self, x, y):
        raise NotImplementedError

    def set_pixel(self, x, y, on):
        raise NotImplementedError

    def refresh(self):
        """make the pending changes visible, nothing to do for displays without an output"""


class Framebuffer(Display):
    """monochrome framebuffer kept in a flat list, one entry per pixel"""
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT, fg_color=LIGHT_BLUE):
        super().__init__(fg_color)
        self.width, self.height = w, h
        self.buffer = [False] * w * h

    def _offset(self, x, y):
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside a {self.width}x{self.height} display")
        return y * self.width + x

    def clear(self):
        self.buffer = [False] * self.width * self.height

    def get_pixel(self, x, y):
        return self.buffer[self._offset(x, y)]

    def set_pixel(self, x, y, on):
        self.buffer[self._offset(x, y)] = bool(on)

    def lit(self):
        """number of pixels currently ON"""
        return sum(self.buffer)

    def rows(self):
        return ["".join("#" if p else "." for p in self.buffer[y * self.width:(y + 1) * self.width])
                for y in range(self.height)]


# ******************** SOUND
class Buzzer:
    def __init__(self, sound_path=None):
        self._sound_path = sound_path

    @property
    def sound_path(self):
        return self._sound_path

    @sound_path.setter
    def sound_path(self, value):
        self._sound_path = value

    def play(self):
        raise NotImplementedError

    def stop(self):
        raise NotImplementedError


class SilentBuzzer(Buzzer):
    """keeps track of the buzzer state without producing any sound"""
    def __init__(self, sound_path=None):
        super().__init__(sound_path)
        self.playing = False
        self.plays = 0

    def play(self):
        self.playing = True
        self.plays += 1

    def stop(self):
        self.playing = False


# ******************** INPUT
class Keypad:
    """
    sixteen keys, 0x0 to 0xF
    keeps both the keys held down and the presses that still have to be consumed by a wait-for-key instruction
    """
    def __init__(self):
        self.held = set()
        self.pressed_keys = []

    def __getitem__(self, key):
        return key in self.held

    def press(self, key):
        key &= 0xF
        self.held.add(key)
        self.pressed_keys.append(key)

    def release(self, key):
        self.held.discard(key & 0xF)

    def untouched(self):
        return len(self.pressed_keys) == 0

    def first(self):
        """get first button pressed present in the queue"""
        return self.pressed_keys.pop(0)

    def clear(self):
        self.held.clear()
        self.pressed_keys.clear()
