import argparse
import logging
import sys

from chip8.config import DEBUG, FOREGROUND_COLORS, SPEEDS, Option
from chip8.computer import Computer
from chip8.errors import Chip8Error

log = logging.getLogger("chip8")


def speed_arg(value):
    if value in SPEEDS:
        return SPEEDS[value]
    try:
        hz = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"speed must be one of {', '.join(SPEEDS)} or a number of Hz")
    if hz <= 0:
        raise argparse.ArgumentTypeError("speed must be a positive number of Hz")
    return hz


def get_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("--speed", type=speed_arg, default=SPEEDS["normal"],
                        help="processor speed: slow, normal, fast or a number of Hz")
    parser.add_argument("--font", help="80 bytes font file loaded instead of the built-in one")
    parser.add_argument("--sound", help="sound file played while the sound timer is active")
    parser.add_argument("--color", choices=sorted(FOREGROUND_COLORS), default="light-blue",
                        help="foreground color")
    parser.add_argument("--no-clear-on-reset", action="store_true",
                        help="keep the screen content when the computer is reset")
    parser.add_argument("--modify-i", action="store_true",
                        help="let FX55 and FX65 increment the I register")
    parser.add_argument("--step", action="store_true",
                        help="start in cycle stepping mode, F10 runs one cycle")
    parser.add_argument("--disassemble", action="store_true",
                        help="print the listing of the rom and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="log every executed instruction")
    return parser.parse_args(argv)


def configure(computer, args):
    computer.set_option_flag(Option.CLEAR_SCREEN_ON_RESET, not args.no_clear_on_reset)
    computer.set_option_flag(Option.MODIFY_I_ON_FX55_AND_FX65, args.modify_i)
    computer.processor.speed = args.speed
    if args.font:
        computer.font_path = args.font
    computer.load_program(args.file)


def disassemble(args):
    computer = Computer()
    configure(computer, args)
    for line in computer.view().disassemble():
        print(line)


def emulate(args):
    from chip8 import frontend   # pygame only gets imported when a window is needed
    pygame = frontend.pygame

    pygame.init()
    pygame.display.set_caption(args.file.replace("\\", "/").split('/')[-1])
    tick_source = frontend.PygameTickSource()
    computer = Computer(
        display=frontend.Screen(fg_color=FOREGROUND_COLORS[args.color]),
        buzzer=frontend.MixerBuzzer(args.sound),
        tick_source=tick_source,
    )
    computer.oscillator.stop_when_halted = False
    configure(computer, args)
    ui = frontend.Frontend(computer, tick_source)
    if args.step:
        computer.oscillator.monostable = True
    else:
        computer.start()
    try:
        ui.run()
    finally:
        computer.stop()
        computer.buzzer.stop()
        pygame.quit()


# ******************** ENTRY POINT SECTION
def main(argv=None):
    args = get_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if DEBUG or args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    try:
        if args.disassemble:
            disassemble(args)
        else:
            emulate(args)
    except (Chip8Error, OSError, ValueError) as err:
        log.error("%s", err)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
