import unittest

from chip8.config import C8_FONTS, MEMORY_SIZE
from chip8.errors import OutOfRange
from chip8.memory import Memory


class TestReadWrite(unittest.TestCase):
    def setUp(self):
        self.mem = Memory()

    def test_size(self):
        self.assertEqual(self.mem.size, MEMORY_SIZE)
        self.assertEqual(len(self.mem), 4096)

    def test_every_address(self):
        for address in range(MEMORY_SIZE):
            self.mem.write(address, address & 0xFF)
        for address in range(MEMORY_SIZE):
            self.assertEqual(self.mem.read(address), address & 0xFF)

    def test_out_of_range(self):
        with self.assertRaises(OutOfRange):
            self.mem.read(4096)
        with self.assertRaises(OutOfRange):
            self.mem.read(-1)
        with self.assertRaises(OutOfRange) as ctx:
            self.mem.write(0x1000, 1)
        self.assertEqual(ctx.exception.address, 0x1000)

    def test_out_of_range_is_an_index_error(self):
        with self.assertRaises(IndexError):
            self.mem[5000]

    def test_not_a_byte(self):
        with self.assertRaises(ValueError):
            self.mem.write(0x200, 256)

    def test_item_access(self):
        self.mem[0x300] = 0xAB
        self.assertEqual(self.mem[0x300], 0xAB)
        self.assertEqual(self.mem[0x300:0x302], b"\xab\x00")


class TestNotifications(unittest.TestCase):
    def setUp(self):
        self.mem = Memory()
        self.changes = []
        self.ranges = []
        self.mem.modified.subscribe(lambda *args: self.changes.append(args))
        self.mem.range_modified.subscribe(lambda *args: self.ranges.append(args))

    def test_single_change(self):
        self.mem.write(0x210, 7)
        self.assertEqual(self.changes, [(0x210, 0, 7)])

    def test_unchanged_value_is_silent(self):
        self.mem.write(0x210, 7)
        self.mem.write(0x210, 7)
        self.assertEqual(len(self.changes), 1)

    def test_delivered_before_write_returns(self):
        seen = []
        self.mem.modified.subscribe(lambda address, old, new: seen.append(self.mem.read(address)))
        self.mem.write(0x400, 0x42)
        self.assertEqual(seen, [0x42])

    def test_range(self):
        self.mem.write_range(0x200, b"\x00\x01\x02")
        self.assertEqual(self.ranges, [(0x200, 0x202)])
        self.assertEqual(self.changes, [])
        self.assertEqual(self.mem.read_range(0x200, 3), b"\x00\x01\x02")

    def test_range_not_fitting(self):
        with self.assertRaises(OutOfRange):
            self.mem.write_range(0xFFF, b"\x01\x02")
        self.assertEqual(self.mem.read(0xFFF), 0)
        self.assertEqual(self.ranges, [])

    def test_empty_range(self):
        self.mem.write_range(0x200, b"")
        self.assertEqual(self.ranges, [])

    def test_clear(self):
        self.mem.write(0x800, 1)
        self.mem.clear()
        self.assertEqual(self.mem.read(0x800), 0)
        self.assertEqual(self.ranges, [(0, 0xFFF)])

    def test_unsubscribe(self):
        handler = self.mem.modified.subscribe(lambda *args: self.fail("should be unsubscribed"))
        self.mem.modified.unsubscribe(handler)
        self.mem.write(0x300, 1)


class TestFont(unittest.TestCase):
    def test_builtin_font(self):
        mem = Memory()
        mem.load_font()
        self.assertEqual(mem.read_range(0, len(C8_FONTS)), bytes(C8_FONTS))


if __name__ == "__main__":
    unittest.main()
