"""Keyboard-driven humanoid: sixteen ICS servos on two serial lines running the motion menu."""

import argparse
import queue
import sys
import threading

import serial

from .controller import IcsController
from .library_main import MAIN_MOTION, all_motions
from .library_walk import HOME_POSITIONS, HOME_STRETCH
from .motion import SERVO_NUM, Button, MotionController
from .servo import IcsServo

DEFAULT_BAUD = 115200

# Trim of each servo, an offset from neutral. Even indices sit on the right
# line, odd indices on the left: shoulder pitch, shoulder roll, elbow,
# thigh roll, thigh pitch, knee, ankle pitch, ankle roll.
TRIM_POS = (
    1350, -1350, -2700, -2700, 0, 0, 0, 0,
    -250, -250, -2000, -2000, 520, 520, 0, 0,
)

# Buttons pressed by each key; the space bar releases every button.
KEY_BUTTONS = {
    "1": Button.L1,
    "2": Button.L2,
    "3": Button.R1,
    "4": Button.R2,
    "a": Button.LEFT,
    "s": Button.DOWN,
    "d": Button.UP,
    "f": Button.RIGHT,
    "h": Button.X,
    "j": Button.A,
    "k": Button.Y,
    "l": Button.B,
}
RELEASE_KEY = " "


class Robot:
    """Two ICS lines, sixteen servos and the motion controller that drives them.

    ``right_port`` and ``left_port`` are pyserial-like objects. Keys put on
    :attr:`keys` are consumed one per :meth:`loop` call.
    """

    def __init__(self, right_port, left_port, clock=None, sleep=None):
        self.baud = DEFAULT_BAUD
        self.controllers = (IcsController(right_port, clock), IcsController(left_port, clock))
        right, left = self.controllers
        self.servos = tuple(IcsServo() for _ in range(SERVO_NUM))
        for pair, servo_id in zip(range(0, SERVO_NUM, 2), range(1, SERVO_NUM // 2 + 1)):
            self.servos[pair].attach(right, servo_id)
            self.servos[pair + 1].attach(left, servo_id)
        self.motion = MotionController(self.servos, clock, sleep)
        self.keys = queue.Queue()

    def setup(self):
        """Open both lines, load the motion menu and glide to the home pose."""
        for controller in self.controllers:
            controller.begin(self.baud)
        self.motion.set_trim(TRIM_POS)
        self.motion.set_home(HOME_POSITIONS, HOME_STRETCH)
        self.motion.begin(all_motions()[MAIN_MOTION])
        self.motion.stand_home()

    def loop(self):
        """Run one step of the motion and of both lines, then handle one pending key."""
        self.motion.loop()
        for controller in self.controllers:
            controller.loop()
        try:
            key = self.keys.get_nowait()
        except queue.Empty:
            return
        self.handle_key(key)

    def handle_key(self, key):
        """Apply a key to the button flags; return whether the key means anything."""
        if key == RELEASE_KEY:
            self.motion.clear_button(Button.ALL)
            return True
        buttons = KEY_BUTTONS.get(key)
        if buttons is None:
            return False
        self.motion.set_button(buttons)
        return True


def _read_keys(stream, keys):
    while True:
        char = stream.read(1)
        if not char:
            return
        keys.put(char)


def _closed_port(name):
    port = serial.Serial()
    port.port = name
    return port


def main(argv=None):
    """Run the robot from the command line, taking button keys from standard input."""
    parser = argparse.ArgumentParser(
        prog="icsmotion",
        description="Drive a sixteen-servo humanoid over two ICS serial lines.",
    )
    parser.add_argument("right", help="serial port of the right-side servos")
    parser.add_argument("left", help="serial port of the left-side servos")
    parser.add_argument("--baud", type=int, default=DEFAULT_BAUD, help="ICS baud rate")
    args = parser.parse_args(argv)

    right = _closed_port(args.right)
    left = _closed_port(args.left)
    robot = Robot(right, left)
    robot.baud = args.baud
    try:
        robot.setup()
        reader = threading.Thread(target=_read_keys, args=(sys.stdin, robot.keys), daemon=True)
        reader.start()
        while True:
            robot.loop()
    except KeyboardInterrupt:
        pass
    finally:
        for port in (right, left):
            if port.is_open:
                port.close()
    return 0