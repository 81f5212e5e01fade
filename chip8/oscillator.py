import logging
from enum import Enum
from fractions import Fraction

from chip8.config import OSCILLATOR_FREQUENCY
from chip8.errors import Chip8Error
from chip8.events import Event

log = logging.getLogger(__name__)


class OscillatorState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    HALTED = "halted"


# ******************** TICK SOURCES
# ManualTickSource fires ticks by hand, the emulation can be driven without a wall clock
class TickSource:
    """schedules a callback at a fixed frequency until it gets cancelled"""
    def __init__(self):
        self.callback = None
        self.frequency = None

    @property
    def scheduled(self):
        return self.callback is not None

    def schedule(self, frequency, callback):
        self.frequency = frequency
        self.callback = callback

    def cancel(self):
        self.callback = None


class ManualTickSource(TickSource):
    def advance(self, ticks=1):
        """fire up to `ticks` ticks, stops early as soon as the schedule is cancelled; returns the ticks fired"""
        fired = 0
        for _ in range(ticks):
            if self.callback is None:
                break
            self.callback()
            fired += 1
        return fired


# ******************** OSCILLATOR
class Oscillator:
    def __init__(self, processor, frequency=OSCILLATOR_FREQUENCY, tick_source=None):
        if frequency <= 0:
            raise ValueError(f"Oscillator frequency must be positive, got {frequency!r}")
        self.processor = processor
        self.frequency = frequency
        self.tick_source = tick_source if tick_source is not None else ManualTickSource()
        self.monostable = False
        self.stop_when_halted = True
        self.emulation_started = False
        self.halted = False
        self.fault = None
        self.ticks = 0
        self.cycles = 0
        self._remainder = Fraction(0)
        self.cycle_stepped = Event("cycle_stepped")
        self.emulation_halted = Event("emulation_halted")

    @property
    def ticking(self):
        return self.tick_source.scheduled

    @property
    def state(self):
        if self.halted:
            return OscillatorState.HALTED
        if self.emulation_started and self.ticking:
            return OscillatorState.RUNNING
        return OscillatorState.STOPPED

    def start(self):
        self.halted = False
        self.fault = None
        self.emulation_started = True
        if not self.ticking:
            self.tick_source.schedule(self.frequency, self.tick)
        log.debug("Oscillator started at %d Hz, processor at %d Hz", self.frequency, self.processor.speed)

    def stop(self):
        self.emulation_started = False
        self.tick_source.cancel()
        log.debug("Oscillator stopped after %d ticks", self.ticks)

    def reset(self):
        """back to a stopped oscillator with no pending fault nor fractional cycles"""
        self.stop()
        self.halted = False
        self.fault = None
        self.ticks = 0
        self.cycles = 0
        self._remainder = Fraction(0)

    def clear_halt(self):
        self.halted = False
        self.fault = None
        self._remainder = Fraction(0)

    def cycles_for_tick(self, speed):
        """how many cycles the next tick runs, the fraction left over is carried to the following ticks"""
        budget = self._remainder + Fraction(speed, self.frequency)
        cycles = max(1, int(budget))
        self._remainder = max(Fraction(0), budget - cycles)
        return cycles

    def tick(self):
        if not self.emulation_started:
            return
        self.ticks += 1
        if self.monostable:
            if self._run(1):
                self.emulation_started = False
                self.cycle_stepped.emit()
            return
        # speed changes only take effect at the start of a tick
        if self._run(self.cycles_for_tick(self.processor.speed)):
            self.processor.decrement_timers()

    def _run(self, cycles):
        for _ in range(cycles):
            try:
                self.processor.step()
            except Chip8Error as err:
                self._halt(err)
                return False
            self.cycles += 1
        return True

    def _halt(self, err):
        log.error("Emulation halted: %s", err)
        self.halted = True
        self.fault = err
        self.emulation_started = False
        if self.stop_when_halted:
            self.tick_source.cancel()
        self.emulation_halted.emit(err, err.pc)
