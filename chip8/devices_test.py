import unittest

from chip8.devices import Display, Framebuffer, Keypad, SilentBuzzer


class TestFramebuffer(unittest.TestCase):
    def test_pixels(self):
        fb = Framebuffer()
        self.assertEqual((fb.width, fb.height), (64, 32))
        fb.set_pixel(63, 31, True)
        self.assertTrue(fb.get_pixel(63, 31))
        self.assertEqual(fb.lit(), 1)
        self.assertEqual(fb.rows()[31][-1], "#")
        fb.clear()
        self.assertEqual(fb.lit(), 0)

    def test_outside(self):
        with self.assertRaises(IndexError):
            Framebuffer().get_pixel(64, 0)

    def test_foreground_color(self):
        fb = Framebuffer(fg_color=(1, 2, 3))
        fb.foreground_color = (4, 5, 6)
        self.assertEqual(fb.foreground_color, (4, 5, 6))

    def test_abstract_display(self):
        with self.assertRaises(NotImplementedError):
            Display().clear()


class TestBuzzer(unittest.TestCase):
    def test_play_stop(self):
        buzzer = SilentBuzzer()
        buzzer.sound_path = "beep.wav"
        buzzer.play()
        self.assertTrue(buzzer.playing)
        buzzer.stop()
        self.assertFalse(buzzer.playing)
        self.assertEqual(buzzer.sound_path, "beep.wav")


class TestKeypad(unittest.TestCase):
    def test_held_keys(self):
        keypad = Keypad()
        keypad.press(0xA)
        self.assertTrue(keypad[0xA])
        keypad.release(0xA)
        self.assertFalse(keypad[0xA])

    def test_presses_are_queued(self):
        keypad = Keypad()
        self.assertTrue(keypad.untouched())
        keypad.press(1)
        keypad.press(2)
        self.assertEqual(keypad.first(), 1)
        self.assertEqual(keypad.first(), 2)
        self.assertTrue(keypad.untouched())

    def test_clear(self):
        keypad = Keypad()
        keypad.press(3)
        keypad.clear()
        self.assertFalse(keypad[3])
        self.assertTrue(keypad.untouched())


if __name__ == "__main__":
    unittest.main()
