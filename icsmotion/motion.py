"""Motion sequencer that drives a set of ICS servos from a small command language.

A motion is a sequence of commands. :class:`MotionController` runs one
command per :meth:`MotionController.loop` call, interpolating servo targets
frame by frame, branching on button flags and loop counters, and calling
into sub-motions.
"""

import contextlib
import logging
import time
from dataclasses import dataclass
from enum import IntEnum, IntFlag

from .protocol import IcsError

logger = logging.getLogger(__name__)

SERVO_NUM = 16
MOTION_STACK_SIZE = 1
CNT_NUM = 8
FRAME_TIME_MS = 15
NEUT_POS = 7500

POS_NO_CHANGE = 0x7FFF
POS_FREE = 0x7000
POS_HOLD = 0x7001

# Pause after a synchronous servo exchange, in microseconds.
SERVO_WAIT_US = 400
# Number of frames used to glide into the home position.
HOME_FRAMES = 70

_VALID_POSITION = range(3500, 11501)
_UINT16_MASK = 0xFFFF
_UINT32_MASK = 0xFFFFFFFF
_HALF_RANGE = _UINT32_MASK // 2


def _micros():
    return (time.monotonic_ns() // 1000) & _UINT32_MASK


def _interpolate(start, end, count, total):
    """Intermediate position, truncating toward zero like integer division in C."""
    delta = (end - start) * count
    step = abs(delta) // total
    return start + (step if delta >= 0 else -step)


class Button(IntFlag):
    """Button flags a motion can branch on."""

    OFF = 0x0000
    UP = 0x0001
    DOWN = 0x0002
    RIGHT = 0x0004
    LEFT = 0x0008
    Y = 0x0010
    A = 0x0020
    B = 0x0040
    X = 0x0080
    R1 = 0x0100
    R2 = 0x0200
    L1 = 0x0400
    L2 = 0x0800
    ALL = 0xFFFFFFFF


class Condition(IntEnum):
    """Branch condition of jump and call commands."""

    NONE = 0x00
    LOOP = 0x01
    BTN = 0x02
    BTN_ON = 0x03
    BTN_OFF = 0x04


class SetType(IntEnum):
    """Servo parameter written by a set command."""

    STRETCH = 0x01
    SPEED = 0x02


def _servo_tuple(values, what):
    values = tuple(int(v) for v in values)
    if len(values) != SERVO_NUM:
        raise ValueError(f"{what} needs {SERVO_NUM} values, got {len(values)}")
    return values


@dataclass(frozen=True)
class PosCommand:
    """Move every servo to an offset from its trim over ``frame`` frames.

    With ``frame`` 0 the entries are instead POS_FREE (go limp), POS_HOLD
    (stiffen at the present position) or anything else (leave alone).
    """

    frame: int
    positions: tuple

    def __post_init__(self):
        object.__setattr__(self, "positions", _servo_tuple(self.positions, "PosCommand"))


@dataclass(frozen=True)
class SetCommand:
    """Write stretch or speed to every servo whose value is not -1."""

    kind: SetType
    values: tuple

    def __post_init__(self):
        object.__setattr__(self, "values", _servo_tuple(self.values, "SetCommand"))


@dataclass(frozen=True)
class CounterCommand:
    """Load a loop counter."""

    counter: int
    value: int


@dataclass(frozen=True)
class JumpCommand:
    """Jump ``dest`` commands forward or back when the condition holds."""

    condition: Condition
    param: int
    dest: int


@dataclass(frozen=True)
class CallCommand:
    """Run another motion when the condition holds."""

    condition: Condition
    param: int
    dest: tuple


@dataclass(frozen=True)
class ReturnCommand:
    """Go back to the start of the calling motion."""


@dataclass(frozen=True)
class HaltCommand:
    """Stop here for good."""


@dataclass(frozen=True)
class WaitCommand:
    """Do nothing for ``frame`` frames."""

    frame: int


class MotionController:
    """Runs motion data on sixteen servos.

    ``servos`` are objects with the synchronous and asynchronous API of
    :class:`~icsmotion.servo.IcsServo`. ``clock`` returns microseconds and may
    wrap at 32 bits; ``sleep`` takes seconds.
    """

    def __init__(self, servos, clock=None, sleep=None):
        self.servos = list(servos)
        if len(self.servos) != SERVO_NUM:
            raise ValueError(f"expected {SERVO_NUM} servos, got {len(self.servos)}")
        self.clock = clock or _micros
        self.sleep = sleep or time.sleep

        self._trims = [0] * SERVO_NUM
        self._home_pos = [0] * SERVO_NUM
        self._home_stretch = [0] * SERVO_NUM
        self._start = [0] * SERVO_NUM
        self._target = [0] * SERVO_NUM
        self._counters = [0] * CNT_NUM
        self._button = 0

        self._motion = None
        self._stack = []
        self._pc = 0
        self._waiting = False
        self._frame_num = 0
        self._frame_cnt = 0
        self._timer_start = 0
        self._halt_reported = False

    # State

    @property
    def motion(self):
        """The motion now running."""
        return self._motion

    @property
    def pc(self):
        """Index of the command now running."""
        return self._pc

    @property
    def depth(self):
        """Number of motions waiting for a return."""
        return len(self._stack)

    @property
    def counters(self):
        """The loop counters."""
        return tuple(self._counters)

    @property
    def buttons(self):
        """The button flags now set."""
        return Button(self._button)

    @property
    def positions(self):
        """The positions the servos are taken to be at."""
        return tuple(self._start)

    # Setup

    def set_trim(self, trims):
        """Set each servo's trim, an offset from the neutral position."""
        self._trims = list(_servo_tuple(trims, "trims"))

    def set_home(self, positions, stretch):
        """Set the home position (offset from trim) and home stretch of each servo."""
        self._home_pos = list(_servo_tuple(positions, "home positions"))
        self._home_stretch = list(_servo_tuple(stretch, "home stretch"))

    def begin(self, main_motion):
        """Start running ``main_motion`` from its first command."""
        self._motion = main_motion
        self._stack = []
        self._pc = 0
        self._waiting = False

    def stand_trim(self):
        """Move every servo straight to its trim position."""
        for index, servo in enumerate(self.servos):
            pos = (NEUT_POS + self._trims[index]) & _UINT16_MASK
            with contextlib.suppress(IcsError):
                servo.set_position(pos)
            self._start[index] = pos

    def stand_home(self):
        """Glide every servo from where it is to its home position."""
        for index, servo in enumerate(self.servos):
            with contextlib.suppress(IcsError):
                servo.set_stretch(self._home_stretch[index] & 0xFF)
        self._target = [self._home_target(i) for i in range(SERVO_NUM)]

        for index, servo in enumerate(self.servos):
            self._start[index] = self._read_position(servo, self._target[index])
            self.sleep(SERVO_WAIT_US / 1_000_000)

        self._frame_num = HOME_FRAMES
        for count in range(HOME_FRAMES + 1):
            self._frame_cnt = count
            for index, servo in enumerate(self.servos):
                p = _interpolate(self._start[index], self._target[index], count, HOME_FRAMES)
                with contextlib.suppress(IcsError):
                    servo.set_position(p & _UINT16_MASK)
            self.sleep(FRAME_TIME_MS / 1000)

        self._start = [self._home_target(i) for i in range(SERVO_NUM)]

    # Running

    def loop(self):
        """Run one step of the current command; call repeatedly."""
        if self._motion is None:
            raise RuntimeError("begin() has not been called")
        if not 0 <= self._pc < len(self._motion):
            raise IndexError(f"program counter {self._pc} is outside the motion")

        command = self._motion[self._pc]
        match command:
            case PosCommand():
                advance = self._cmd_pos(command)
            case SetCommand():
                advance = self._cmd_set(command)
            case CounterCommand():
                advance = self._cmd_counter(command)
            case JumpCommand():
                advance = self._cmd_jump(command)
            case CallCommand():
                advance = self._cmd_call(command)
            case ReturnCommand():
                advance = self._cmd_return()
            case HaltCommand():
                advance = self._cmd_halt()
            case WaitCommand():
                advance = self._cmd_wait(command)
            case _:
                advance = False

        if advance:
            self._pc += 1
            self._waiting = False

    def set_button(self, flags):
        """Turn the given button flags on."""
        self._button = (self._button | int(flags)) & _UINT32_MASK

    def clear_button(self, flags):
        """Turn the given button flags off."""
        self._button = self._button & ~int(flags) & _UINT32_MASK

    def move_button(self, flags):
        """Replace all button flags."""
        self._button = int(flags) & _UINT32_MASK

    # Commands

    def _cmd_pos(self, command):
        if not self._waiting:
            self._waiting = True
            self._frame_num = command.frame
            self._frame_cnt = 1
            if self._frame_num == 0:
                self._free_or_hold(command.positions)
                return True

            for index, pos in enumerate(command.positions):
                if pos != POS_NO_CHANGE:
                    self._target[index] = (NEUT_POS + self._trims[index] + pos) & _UINT16_MASK
                else:
                    self._target[index] = POS_NO_CHANGE
            logger.debug("POS %s", command.positions)

            for index, pos in enumerate(command.positions):
                if pos != POS_NO_CHANGE:
                    self._request_frame(index)
            self._start_timer()
            return False

        if self._frame_time() >= self._frame_cnt:
            self._frame_cnt += 1
            if self._frame_cnt > self._frame_num:
                for index, target in enumerate(self._target):
                    if target != POS_NO_CHANGE:
                        self._start[index] = target
                return True
            for index, target in enumerate(self._target):
                if target != POS_NO_CHANGE:
                    self._request_frame(index)
        return False

    def _free_or_hold(self, positions):
        for index, (servo, pos) in enumerate(zip(self.servos, positions)):
            if pos == POS_FREE:
                logger.debug("servo %d FREE", index)
                with contextlib.suppress(IcsError):
                    servo.set_position(0)
            elif pos == POS_HOLD:
                logger.debug("servo %d HOLD", index)
                self._start[index] = self._read_position(servo, self._home_target(index))
                self.sleep(SERVO_WAIT_US / 1_000_000)
                with contextlib.suppress(IcsError):
                    servo.set_position(self._start[index])
                self.sleep(SERVO_WAIT_US / 1_000_000)

    def _cmd_set(self, command):
        logger.debug("SET %s %s", command.kind.name, command.values)
        for servo, value in zip(self.servos, command.values):
            if value == -1:
                continue
            write = servo.set_stretch if command.kind == SetType.STRETCH else servo.set_speed
            with contextlib.suppress(IcsError):
                write(value & 0xFF)
            self.sleep(SERVO_WAIT_US / 1_000_000)
        return True

    def _cmd_counter(self, command):
        if 0 <= command.counter < CNT_NUM:
            logger.debug("CNT[%d] = %d", command.counter, command.value)
            self._counters[command.counter] = command.value
        else:
            logger.debug("bad counter number %d", command.counter)
        return True

    def _cmd_jump(self, command):
        if command.condition == Condition.LOOP:
            taken = False
            counter = command.param
            if 0 <= counter < CNT_NUM:
                self._counters[counter] -= 1
                taken = self._counters[counter] > 0
            else:
                logger.debug("bad counter number %d", counter)
        else:
            taken = self._condition_holds(command.condition, command.param)

        if taken:
            self._pc += command.dest
            self._waiting = False
            return False
        return True

    def _cmd_call(self, command):
        if command.condition == Condition.LOOP:
            return True
        if not self._condition_holds(command.condition, command.param):
            return True
        if len(self._stack) >= MOTION_STACK_SIZE:
            return True
        logger.debug("CALL")
        self._stack.append(self._motion)
        self._motion = command.dest
        self._pc = 0
        self._waiting = False
        return False

    def _cmd_return(self):
        if self._stack:
            logger.debug("RET")
            self._motion = self._stack.pop()
            self._pc = 0
            self._waiting = False
        return False

    def _cmd_halt(self):
        if not self._halt_reported:
            self._halt_reported = True
            logger.debug("HALT")
        return False

    def _cmd_wait(self, command):
        if not self._waiting:
            self._waiting = True
            self._frame_num = command.frame
            self._frame_cnt = 1
            self._start_timer()
            return False
        if self._frame_time() >= self._frame_cnt:
            self._frame_cnt += 1
            if self._frame_cnt > self._frame_num:
                return True
        return False

    # Helpers

    def _condition_holds(self, condition, param):
        param = int(param) & _UINT32_MASK
        if condition == Condition.NONE:
            return True
        if condition == Condition.BTN:
            return self._button == param
        if condition == Condition.BTN_ON:
            return (self._button & param) == param
        if condition == Condition.BTN_OFF:
            return (self._button & param) == 0
        return False

    def _home_target(self, index):
        return (NEUT_POS + self._trims[index] + self._home_pos[index]) & _UINT16_MASK

    @staticmethod
    def _read_position(servo, fallback):
        try:
            pos = servo.get_position()
        except IcsError:
            return fallback
        return pos if pos in _VALID_POSITION else fallback

    def _request_frame(self, index):
        p = _interpolate(self._start[index], self._target[index], self._frame_cnt, self._frame_num)
        self.servos[index].request_position(p & _UINT16_MASK)

    def _start_timer(self):
        self._timer_start = self.clock() & _UINT32_MASK

    def _frame_time(self):
        elapsed = (self.clock() - self._timer_start) & _UINT32_MASK
        if elapsed > _HALF_RANGE:
            elapsed = 0
        return elapsed // 1000 // FRAME_TIME_MS