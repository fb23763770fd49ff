"""Action motions and the main menu motion for a sixteen-servo humanoid.

The action motions cover getting up, punches, guarding, greetings and
exercises. The main motion ``M000`` stands the robot at home and then
calls whichever motion matches the buttons held.
"""

from functools import lru_cache

from .library_walk import HOME_POSITIONS, HOME_STRETCH, walking_motions
from .motion import (
    POS_FREE,
    POS_HOLD,
    POS_NO_CHANGE,
    SERVO_NUM,
    Button,
    CallCommand,
    Condition,
    CounterCommand,
    JumpCommand,
    PosCommand,
    ReturnCommand,
    SetCommand,
    SetType,
    WaitCommand,
)

MAIN_MOTION = "M000"

_KEEP = -1


def _pos(frame, *positions):
    return PosCommand(frame, positions)


def _jump(condition, buttons, dest):
    return JumpCommand(condition, int(buttons), dest)


def _home_stretch():
    return SetCommand(SetType.STRETCH, HOME_STRETCH)


def _home_pos(frame=10):
    return PosCommand(frame, HOME_POSITIONS)


def _arms_only(kind, value):
    """Set ``value`` on both shoulder pitch servos and leave the rest."""
    return SetCommand(kind, (value, value) + (_KEEP,) * (SERVO_NUM - 2))


def _supine_rise():
    return (
        _pos(10, *(0,) * SERVO_NUM),
        _pos(40, 3700, -3700, 0, 0, -2800, -2800, 0, 0, 800, 800, 0, 0, 0, 0, 0, 0),
        _pos(30, 1800, -1800, 0, 0, 0, 0, 0, 0, 2500, 2500, 0, 0, 0, 0, 0, 0),
        _pos(30, 1800, -1800, 0, 0, 0, 0, 0, 0, 2500, 2500, 3650, 3650, 1600, 1600, 0, 0),
        _pos(15, 2000, -2000, 0, 0, -360, -360, 0, 0, 0, 0, 2500, 2500, 600, 600, 0, 0),
        _pos(15, 2000, -2000, 0, 0, -360, -360, 0, 0, -700, -700, 2700, 2700, 1600, 1600, 0, 0),
        _pos(50, 298, -270, 0, 0, -360, -360, 0, 0, 800, 800, 2700, 2700, 1850, 1850, 0, 0),
        _pos(80, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 200, 200, 0, 0),
    )


def _prone_rise_tail():
    return (
        _pos(30, -2300, 2300, 0, 0, 0, 0, 0, 0, 3500, 3500, 3820, 3820, 1500, 1500, 0, 0),
        _pos(20, 0, 0, 0, 0, 0, 0, 0, 0, 1800, 1800, 3600, 3600, 1800, 1800, 0, 0),
        _pos(40, -1500, 1500, 0, 0, 0, 0, 0, 0, 2000, 2000, 2900, 2900, 1500, 1500, 0, 0),
        _pos(30, -1500, 1500, 0, 0, 0, 0, 0, 0, 1500, 1500, 2000, 2000, 1000, 1000, 0, 0),
        _pos(50, 0, 0, 0, 0, 0, 0, 0, 0, 500, 500, 0, 0, 0, 0, 0, 0),
    )


def _crouch():
    return (
        _pos(50, 0, 0, 0, 10, -800, -800, 0, 0, 1900, 1900, 3800, 3800, 1900, 1900, 0, 0),
        _pos(20, -1300, 1300, 0, 10, -800, -800, 0, 0, 3100, 3100, 3800, 3800, 1900, 1900, 0, 0),
        _pos(30, -2100, 2100, 0, 10, -800, -800, 0, 0, 3100, 3100, 2800, 2800, 1900, 1900, 0, 0),
    )


def _rise_from_back():
    return (
        SetCommand(
            SetType.STRETCH,
            (127, 127, _KEEP, _KEEP, _KEEP, _KEEP, _KEEP, _KEEP,
             127, 127, 127, 127, 127, 127, _KEEP, _KEEP),
        ),
        *_supine_rise(),
        _home_stretch(),
        _home_pos(),
        ReturnCommand(),
    )


def _rise_from_front():
    return (
        SetCommand(
            SetType.SPEED,
            (_KEEP,) * 8 + (127,) * 6 + (_KEEP, _KEEP),
        ),
        _pos(10, *(0,) * SERVO_NUM),
        _pos(30, 0, 0, 2500, 2500, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
        _pos(30, -5400, 5400, 2500, 2500, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
        _pos(20, -5400, 5400, 0, 0, -2500, -2500, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
        _pos(5, -2700, 2700, 0, 0, -2500, -2500, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
        _pos(10, -2700, 2700, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1500, 1500, 0, 0),
        *_prone_rise_tail(),
        _home_stretch(),
        _home_pos(),
        ReturnCommand(),
    )


def _punch_left():
    return (
        _pos(20, 1200, -668, 0, 561, -3400, -2675, -605, 452, 1800, -60, 1300, 800, -280, 1221, -485, 612),
        _pos(3, 1196, 2839, 4, 589, -3391, -400, -605, 452, 1800, -60, 1300, 800, -280, 1221, -485, 612),
        _jump(Condition.BTN, Button.L1, -1),
        _home_pos(),
        ReturnCommand(),
    )


def _punch_right():
    return (
        _arms_only(SetType.SPEED, 127),
        _arms_only(SetType.STRETCH, 127),
        _pos(20, 668, -1200, 561, 4, -2675, -3400, -452, 605, -60, 1800, 800, 1300, 1221, -280, -612, 485),
        _pos(1, -2839, -1200, 589, 0, -400, -3400, -452, 605, -60, 1800, 800, 1300, 1221, -280, -612, 485),
        _jump(Condition.BTN, Button.R1, -1),
        _home_pos(),
        ReturnCommand(),
    )


def _backhand_left():
    return (
        _pos(5, 400, -1500, 0, 700, -1200, -3000, 0, 0, 150, 150, 300, 300, 150, 150, 0, 0),
        _pos(3, -400, 937, 360, 2811, -1200, -505, -827, 415, -22, 741, 56, 1246, 173, 649, -541, 405),
        _jump(Condition.BTN, Button.A | Button.LEFT, -1),
        _home_pos(),
        ReturnCommand(),
    )


def _backhand_right():
    return (
        _pos(5, 1500, -400, 700, 0, -3400, -1200, 0, 0, 150, 150, 300, 300, 150, 150, 0, 0),
        _pos(3, -649, -400, 2811, 360, -505, -1200, -415, 827, 250, -9, 800, 195, 500, 247, -541, 733),
        _jump(Condition.BTN, Button.A | Button.RIGHT, -1),
        _home_pos(),
        ReturnCommand(),
    )


def _legs_only(value):
    """``value`` on the six leg pitch servos, no change elsewhere."""
    return (POS_NO_CHANGE,) * 8 + (value,) * 6 + (POS_NO_CHANGE,) * 2


def _guard():
    return (
        _pos(10, 400, -400, 0, 0, -1200, -1200, 0, 0, 1360, 1360, 1800, 1800, 1080, 1080, 0, 0),
        _pos(25, -1700, 1700, -200, -200, -3300, -3300, 0, 0, 1900, 2952, 3800, 3580, 1900, 681, 0, -10),
        PosCommand(0, _legs_only(POS_FREE)),
        _jump(Condition.BTN, Button.A | Button.DOWN, 0),
        PosCommand(0, _legs_only(POS_HOLD)),
        _pos(10, 0, 0, 0, 0, -1200, -1200, 0, 0, 1800, 1800, 3600, 3600, 1800, 1800, 0, 0),
        _pos(20, -300, 300, 0, 0, -1200, -1200, 0, 0, 1600, 1600, 2900, 2900, 1500, 1500, 0, 0),
        _pos(15, 0, 0, 0, 0, -1200, -1200, 0, 0, 1500, 1500, 2000, 2000, 1000, 1000, 0, 0),
        _pos(15, *(0,) * SERVO_NUM),
        _home_pos(),
        ReturnCommand(),
    )


def _bow():
    upright = (400, -400, 0, 0, -1200, -1200) + (0,) * 10
    return (
        _home_pos(),
        PosCommand(10, upright),
        _pos(100, 400, -400, 0, 0, -1200, -1200, 0, 0, 1500, 1500, 0, 0, 0, 0, 0, 0),
        PosCommand(50, upright),
        _home_pos(),
        ReturnCommand(),
    )


def _wave():
    return (
        CounterCommand(0, 3),
        _pos(40, -3800, -400, 0, 0, -1200, -1200, 0, 0, 150, 150, 300, 300, 150, 150, 0, 0),
        _pos(40, -3800, -400, -400, 0, -1200, -1200, 0, 0, 350, 150, 700, 300, 350, 150, 150, 150),
        _pos(40, -3800, -400, 800, 0, -1200, -1200, 0, 0, 350, 150, 700, 300, 350, 150, 150, 150),
        _pos(40, -3800, -400, -400, 0, -1200, -1200, 0, 0, 150, 350, 300, 700, 150, 350, -150, -150),
        _pos(40, -3800, -400, 800, 0, -1200, -1200, 0, 0, 150, 350, 300, 700, 150, 350, -150, -150),
        _jump(Condition.LOOP, 0, -4),
        _home_pos(40),
        ReturnCommand(),
    )


def _push_ups():
    return (
        CounterCommand(0, 4),
        *_crouch(),
        _pos(30, -2000, 2000, 0, 10, -800, -800, 0, 0, 1600, 1600, 2500, 2500, 1900, 1900, 0, 0),
        _pos(30, -2000, 2000, 0, 0, -800, -800, 0, 0, 500, 500, 600, 600, 70, 70, 0, 0),
        WaitCommand(33),
        _pos(40, -2000, 2000, 0, 0, -800, -800, 0, 0, 500, 500, 600, 600, 70, 70, 0, 0),
        _pos(15, -900, 900, 0, 0, -2400, -2400, 0, 0, 500, 500, 600, 600, 70, 70, 0, 0),
        _jump(Condition.LOOP, 0, -2),
        *_prone_rise_tail(),
        _home_pos(),
        ReturnCommand(),
    )


def _forward_roll():
    return (
        _arms_only(SetType.STRETCH, 127),
        *_crouch(),
        _pos(20, -3093, 2984, -72, 14, -3709, -3718, 4, -18, 3355, -768, -811, 2246, 2234, 401, 4, 4),
        WaitCommand(33),
        _pos(100, -4829, 4800, -72, 14, -3709, -3718, 4, -18, 3355, -768, -811, 2246, 2234, 401, 4, 4),
        _pos(100, -4500, 4500, -72, 14, -3709, -3718, 0, 0, -800, -800, 2400, 2400, 200, 200, 0, 0),
        _pos(60, -5000, 5000, -72, 14, -3709, -3718, 0, 0, 0, 0, 2000, 2000, -650, -650, 0, 0),
        _home_pos(30),
        *_supine_rise(),
        _home_stretch(),
        _home_pos(),
        ReturnCommand(),
    )


def _go_limp():
    return (
        PosCommand(0, (POS_FREE,) * SERVO_NUM),
        _jump(Condition.BTN_OFF, Button.B, 0),
        PosCommand(0, (POS_HOLD,) * SERVO_NUM),
        _home_pos(70),
        ReturnCommand(),
    )


# Order of the calls in the main motion, with the buttons that start each.
_MENU = (
    ("M001", Button.UP),
    ("M002", Button.DOWN),
    ("M003", Button.LEFT),
    ("M004", Button.RIGHT),
    ("M011", Button.X | Button.UP),
    ("M012", Button.X | Button.DOWN),
    ("M013", Button.X | Button.LEFT),
    ("M014", Button.X | Button.RIGHT),
    ("M021", Button.L2),
    ("M022", Button.R2),
    ("M101", Button.B | Button.UP),
    ("M102", Button.B | Button.DOWN),
    ("M201", Button.L1),
    ("M202", Button.R1),
    ("M211", Button.A | Button.LEFT),
    ("M212", Button.A | Button.RIGHT),
    ("M220", Button.A | Button.DOWN),
    ("M301", Button.Y | Button.UP),
    ("M302", Button.Y | Button.DOWN),
    ("M401", Button.Y | Button.LEFT),
    ("M402", Button.Y | Button.RIGHT),
    ("M500", Button.A | Button.L1 | Button.L2),
)


@lru_cache(maxsize=None)
def _build_actions():
    return {
        "M101": _rise_from_back(),
        "M102": _rise_from_front(),
        "M201": _punch_left(),
        "M202": _punch_right(),
        "M211": _backhand_left(),
        "M212": _backhand_right(),
        "M220": _guard(),
        "M301": _bow(),
        "M302": _wave(),
        "M401": _push_ups(),
        "M402": _forward_roll(),
        "M500": _go_limp(),
    }


@lru_cache(maxsize=None)
def _build_all():
    motions = dict(walking_motions())
    motions.update(_build_actions())
    calls = tuple(
        CallCommand(Condition.BTN, int(buttons), motions[name]) for name, buttons in _MENU
    )
    main = (
        SetCommand(SetType.SPEED, (127,) * SERVO_NUM),
        _home_stretch(),
        _home_pos(),
        _jump(Condition.BTN_OFF, Button.ALL, 0),
        *calls,
        _jump(Condition.NONE, 0, -(len(calls) + 1)),
    )
    motions[MAIN_MOTION] = main
    return motions


def action_motions():
    """Return the getting-up, fighting, greeting and exercise motions by name."""
    return dict(_build_actions())


def all_motions():
    """Return every motion by name, the main menu motion ``M000`` included."""
    return dict(_build_all())