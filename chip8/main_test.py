import contextlib
import io
import os
import tempfile
import unittest

from chip8.__main__ import get_args, main, speed_arg
from chip8.config import SPEED_FAST


class TestArguments(unittest.TestCase):
    def test_speed_names(self):
        self.assertEqual(speed_arg("fast"), SPEED_FAST)
        self.assertEqual(speed_arg("700"), 700)

    def test_defaults(self):
        args = get_args(["-f", "rom.ch8"])
        self.assertEqual(args.file, "rom.ch8")
        self.assertFalse(args.modify_i)
        self.assertFalse(args.no_clear_on_reset)

    def test_bad_speed(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                get_args(["-f", "rom.ch8", "--speed", "warp"])


class TestDisassembleCommand(unittest.TestCase):
    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.rom = os.path.join(tmp.name, "loop.ch8")
        with open(self.rom, mode='wb') as f:
            f.write(b"\x00\xE0\x12\x02")

    def test_listing(self):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            status = main(["-f", self.rom, "--disassemble"])
        self.assertEqual(status, 0)
        lines = out.getvalue().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn("CLS", lines[0])
        self.assertIn("JP 0x202", lines[1])

    def test_missing_rom(self):
        with self.assertLogs("chip8", level="ERROR"):
            status = main(["-f", self.rom + ".missing", "--disassemble"])
        self.assertEqual(status, 1)


if __name__ == "__main__":
    unittest.main()
