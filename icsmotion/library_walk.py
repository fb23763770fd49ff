"""Walking motions for a sixteen-servo humanoid.

Each motion is a tuple of commands for
:class:`~icsmotion.motion.MotionController`. The loops inside them repeat
while their button is held and fall through to the home pose once it is
released.
"""

from functools import lru_cache

from .motion import (
    Button,
    CallCommand,
    Condition,
    JumpCommand,
    PosCommand,
    ReturnCommand,
    SetCommand,
    SetType,
)

HOME_POSITIONS = (400, -400, 0, 0, -1200, -1200, 0, 0, 150, 150, 300, 300, 150, 150, 0, 0)
HOME_STRETCH = (20, 20, 20, 20, 65, 65, 65, 65, 65, 65, 65, 65, 65, 65, 65, 65)

_KEEP = -1


def _stretch(*values):
    return SetCommand(SetType.STRETCH, values)


def _pos(frame, *positions):
    return PosCommand(frame, positions)


def _jump(condition, buttons, dest):
    return JumpCommand(condition, int(buttons), dest)


def _home_stretch():
    return SetCommand(SetType.STRETCH, HOME_STRETCH)


def _home_pos(frame=10):
    return PosCommand(frame, HOME_POSITIONS)


def _walk_stretch():
    return _stretch(_KEEP, _KEEP, _KEEP, _KEEP, _KEEP, _KEEP, 60, 60, 60, 60, 60, 60, 60, 60, 60, 60)


def _walk_lean():
    return _pos(5, 400, -400, 0, 0, -1200, -1200, 0, 0, 150, 250, 300, 500, 150, 250, -200, -150)


def _forward():
    return (
        _walk_stretch(),
        _walk_lean(),
        _pos(12, 0, 0, 0, 0, -1200, -1200, 0, 0, 600, 50, 1200, 0, 800, 150, 0, -300),
        _pos(4, 400, 400, 0, 0, -1200, -1200, -50, 0, 500, -200, 1000, -30, 500, 200, 0, -200),
        _pos(3, 400, 400, 0, 0, -1200, -1200, -50, 0, 500, -400, 600, -50, 100, 350, 0, -200),
        _stretch(_KEEP, _KEEP, _KEEP, _KEEP, _KEEP, _KEEP, 90, 40, 100, 40, 100, 40, 100, 40, 90, 40),
        _pos(8, 400, 400, 0, 0, -1200, -1200, 0, 0, 800, -400, 1100, 0, 400, 400, 200, 200),
        _jump(Condition.BTN_OFF, Button.UP, +9),
        _pos(10, 0, 0, 0, 0, -1200, -1200, 0, 50, 50, 600, 0, 1200, 120, 550, 250, 0),
        _pos(4, -400, -400, 0, 0, -1200, -1200, 0, 50, -200, 500, -30, 1000, 200, 500, 200, 0),
        _pos(3, -400, -400, 0, 0, -1200, -1200, 0, 50, -400, 500, -50, 600, 350, 100, 200, 0),
        _stretch(_KEEP, _KEEP, _KEEP, _KEEP, _KEEP, _KEEP, 60, 90, 40, 100, 40, 100, 40, 100, 60, 90),
        _pos(8, -400, -400, 0, 0, -1200, -1200, 0, 0, -400, 800, 0, 1100, 400, 400, -200, -200),
        _jump(Condition.BTN_OFF, Button.UP, +3),
        _pos(10, 0, 0, 0, 0, -1200, -1200, -50, 0, 600, 50, 1200, 0, 550, 120, 0, -250),
        _jump(Condition.NONE, 0, -12),
        _home_stretch(),
        _home_pos(),
        ReturnCommand(),
    )


def _backward():
    return (
        _walk_stretch(),
        _walk_lean(),
        _pos(12, 0, 0, 0, 0, -1200, -1200, 0, 0, 600, 50, 1200, 0, 800, 0, 0, -300),
        _jump(Condition.BTN_OFF, Button.DOWN, +11),
        _pos(10, -400, -400, 0, 0, -1200, -1200, 0, 0, -400, 600, 0, 750, 400, 150, 0, -300),
        _pos(6, -400, -400, 0, 0, -1200, -1200, 0, 0, -400, 200, 0, 200, 200, 100, 200, 200),
        _pos(6, -400, -400, 0, 0, -1200, -1200, 0, 0, -200, 500, 0, 1000, 100, 300, 300, 0),
        _pos(8, 0, 0, 0, 0, -1200, -1200, 0, 0, 50, 600, 0, 1200, -50, 400, 300, 0),
        _jump(Condition.BTN_OFF, Button.DOWN, +6),
        _pos(10, 400, 400, 0, 0, -1200, -1200, 0, 0, 600, -400, 750, 0, 150, 400, 0, 300),
        _pos(6, 400, 400, 0, 0, -1200, -1200, 0, 0, 200, -400, 200, 0, 100, 200, -200, -200),
        _pos(6, 400, 400, 0, 0, -1200, -1200, 0, 0, 500, -200, 1000, 0, 300, 100, 0, -300),
        _pos(8, 0, 0, 0, 0, -1200, -1200, 0, 0, 600, 50, 1200, 0, 400, -50, 0, -300),
        _jump(Condition.NONE, 0, -10),
        _home_stretch(),
        _home_pos(),
        ReturnCommand(),
    )


def _left():
    return (
        _pos(4, 400, -400, 0, 0, -1200, -1200, 0, 0, 150, 0, 300, 0, 150, 0, 200, 400),
        _pos(10, 400, -400, 0, 0, -1200, -1200, 0, 0, 0, 500, -50, 1000, 0, 500, 400, 0),
        _pos(3, 400, -400, 0, 0, -1200, -1200, -300, 500, 0, 500, -50, 1000, 0, 500, 0, 300),
        _pos(6, 400, -400, 0, 0, -1200, -1200, -500, 500, 0, 500, -50, 1000, 0, 500, -200, 300),
        _pos(10, 400, -400, 0, 0, -1200, -1200, 0, 0, 150, 150, 300, 300, 150, 150, 0, -200),
        _jump(Condition.BTN, Button.LEFT, -5),
        _home_pos(),
        ReturnCommand(),
    )


def _right():
    return (
        _pos(4, 400, -400, 0, 0, -1200, -1200, 0, 0, 0, 150, 0, 300, 0, 150, -400, -200),
        _pos(10, 400, -400, 0, 0, -1200, -1200, 0, 0, 500, 0, 1000, -50, 500, 0, 0, -400),
        _pos(3, 400, -400, 0, 0, -1200, -1200, -500, 300, 500, 0, 1000, -50, 500, 0, -300, 0),
        _pos(6, 400, -400, 0, 0, -1200, -1200, -500, 500, 500, 0, 1000, -50, 500, 0, -300, 200),
        _pos(10, 400, -390, 0, 0, -1200, -1200, 0, 0, 150, 150, 300, 300, 150, 150, 200, 0),
        _jump(Condition.BTN, Button.RIGHT, -5),
        _home_pos(),
        ReturnCommand(),
    )


def _short_forward():
    return (
        _walk_stretch(),
        _walk_lean(),
        _pos(6, 0, 0, 0, 0, -1200, -1200, 0, 0, 400, 50, 800, 0, 400, 50, 0, -200),
        _pos(3, 400, 400, 0, 0, -1200, -1200, 0, 0, 500, -200, 1000, 0, 550, 200, 0, -200),
        _pos(2, 200, 200, 0, 0, -1200, -1200, 0, 0, 150, -300, 300, 0, 150, 300, 0, -100),
        _pos(5, 200, 200, 0, 0, -1200, -1200, 0, 0, 150, -300, 300, 0, 150, 300, 100, 150),
        _jump(Condition.BTN_OFF, Button.UP, +8),
        _pos(6, 0, 0, 0, 0, -1200, -1200, 0, 0, 50, 400, 0, 800, 50, 400, 300, 0),
        _pos(3, -400, -400, 0, 0, -1200, -1200, 0, 0, -200, 500, 0, 1000, 200, 550, 200, 0),
        _pos(2, -200, -200, 0, 0, -1200, -1200, 0, 0, -300, 150, 0, 300, 300, 150, 100, 0),
        _pos(5, -200, -200, 0, 0, -1200, -1200, 0, 0, -300, 150, 0, 300, 300, 150, -150, -100),
        _jump(Condition.BTN_OFF, Button.UP, +3),
        _pos(6, 0, 0, 0, 0, -1200, -1200, 0, 0, 400, 50, 800, 0, 400, 50, 0, -150),
        _jump(Condition.NONE, 0, -10),
        _home_stretch(),
        _home_pos(),
        ReturnCommand(),
    )


def _short_backward():
    return (
        _walk_stretch(),
        _walk_lean(),
        _pos(6, 0, 0, 0, 0, -1200, -1200, 0, 0, 400, 50, 800, 0, 400, 50, 0, -200),
        _jump(Condition.BTN_OFF, Button.DOWN, +11),
        _pos(4, -200, -200, 0, 0, -1200, -1200, 0, 0, -300, 150, 0, 300, 300, 100, -100, -100),
        _pos(2, -200, -200, 0, 0, -1200, -1200, 0, 0, -300, 150, 0, 300, 300, 100, 100, 0),
        _pos(3, -400, -400, 0, 0, -1200, -1200, 0, 0, -200, 500, 0, 1000, 150, 500, 200, 0),
        _pos(6, 0, 0, 0, 0, -1200, -1200, 0, 0, 50, 400, 0, 800, 50, 400, 300, 0),
        _jump(Condition.BTN_OFF, Button.DOWN, +6),
        _pos(4, 200, 200, 0, 0, -1200, -1200, 0, 0, 150, -300, 300, 0, 100, 300, 100, 100),
        _pos(2, 200, 200, 0, 0, -1200, -1200, 0, 0, 150, -300, 300, 0, 100, 300, 0, -100),
        _pos(3, 400, 400, 0, 0, -1200, -1200, 0, 0, 500, -200, 1000, 0, 500, 150, 0, -200),
        _pos(6, 0, 0, 0, 0, -1200, -1200, 0, 0, 400, 50, 800, 0, 400, 50, 0, -150),
        _jump(Condition.NONE, 0, -10),
        _home_stretch(),
        _home_pos(),
        ReturnCommand(),
    )


def _short_left():
    return (
        _pos(10, 400, -400, 0, 0, -1200, -1200, 0, 0, 0, 500, -50, 1000, 0, 500, 150, 0),
        _pos(3, 400, -400, 0, 0, -1200, -1200, -100, 200, 0, 500, -50, 1000, 0, 500, 0, 150),
        _pos(6, 400, -400, 0, 0, -1200, -1200, -200, 200, 0, 500, -50, 1000, 0, 500, -100, 100),
        _pos(10, 400, -400, 0, 0, -1200, -1200, 0, 0, 150, 150, 300, 300, 150, 150, 0, -200),
        _pos(4, 400, -400, 0, 0, -1200, -1200, 0, 0, 150, 0, 300, 0, 150, 0, 100, 200),
        _jump(Condition.BTN, Button.L1 | Button.LEFT, -5),
        _home_pos(),
        ReturnCommand(),
    )


def _short_right():
    return (
        _pos(10, 400, -400, 0, 0, -1200, -1200, 0, 0, 500, 0, 1000, -50, 500, 0, 0, -150),
        _pos(3, 400, -400, 0, 0, -1200, -1200, -200, 100, 500, 0, 1000, -50, 500, 0, -150, 0),
        _pos(6, 400, -400, 0, 0, -1200, -1200, -200, 200, 500, 0, 1000, -50, 500, 0, -100, 100),
        _pos(10, 400, -390, 0, 0, -1200, -1200, 0, 0, 150, 150, 300, 300, 150, 150, 200, 0),
        _pos(4, 400, -390, 0, 0, -1200, -1200, 0, 0, 0, 150, 0, 300, 0, 150, -200, -100),
        _jump(Condition.BTN, Button.L1 | Button.RIGHT, -5),
        _home_pos(),
        ReturnCommand(),
    )


def _turn_left():
    return (
        _pos(3, 400, -400, 0, 0, -1200, -1200, -120, 120, 650, -500, 300, 200, -400, 650, -300, 300),
        _pos(5, 400, -400, 0, 0, -1200, -1200, -200, 200, 650, -500, 300, 200, -400, 650, -300, 300),
        _home_pos(20),
        _jump(Condition.BTN, Button.L2, -3),
        _home_pos(),
        ReturnCommand(),
    )


def _turn_right():
    return (
        _pos(3, 400, -400, 0, 0, -1200, -1200, -120, 120, -500, 650, 200, 300, 650, -400, -300, 300),
        _pos(5, 400, -400, 0, 0, -1200, -1200, -200, 200, -500, 650, 200, 300, 650, -400, -300, 300),
        _home_pos(20),
        _jump(Condition.BTN, Button.R2, -3),
        _home_pos(),
        ReturnCommand(),
    )


@lru_cache(maxsize=None)
def _build():
    return {
        "M001": _forward(),
        "M002": _backward(),
        "M003": _left(),
        "M004": _right(),
        "M011": _short_forward(),
        "M012": _short_backward(),
        "M013": _short_left(),
        "M014": _short_right(),
        "M021": _turn_left(),
        "M022": _turn_right(),
    }


def walking_motions():
    """Return the walking and turning motions, keyed by motion name."""
    return dict(_build())


__all__ = ["HOME_POSITIONS", "HOME_STRETCH", "walking_motions", "CallCommand"]