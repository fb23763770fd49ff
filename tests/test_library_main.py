import itertools

import pytest

from icsmotion.library_main import action_motions, all_motions
from icsmotion.library_walk import HOME_POSITIONS, walking_motions
from icsmotion.motion import (
    POS_FREE,
    SERVO_NUM,
    Button,
    CallCommand,
    Condition,
    CounterCommand,
    JumpCommand,
    MotionController,
    PosCommand,
    ReturnCommand,
    SetCommand,
    SetType,
)

ACTION_NAMES = {
    "M101", "M102", "M201", "M202", "M211", "M212",
    "M220", "M301", "M302", "M401", "M402", "M500",
}


class FakeServo:
    def __init__(self):
        self.positions = []
        self.requested = []
        self.stretch = []
        self.speed = []

    def set_position(self, pos):
        self.positions.append(pos)
        return pos

    def get_position(self):
        return 7500

    def set_stretch(self, value):
        self.stretch.append(value)

    def set_speed(self, value):
        self.speed.append(value)

    def request_position(self, pos):
        self.requested.append(pos)


def make_controller():
    servos = [FakeServo() for _ in range(SERVO_NUM)]
    clock = itertools.count(0, 20000)
    controller = MotionController(servos, clock=lambda: next(clock), sleep=lambda s: None)
    return controller, servos


def test_action_motion_names():
    assert set(action_motions()) == ACTION_NAMES


def test_all_motions_combines_walking_actions_and_main():
    motions = all_motions()
    assert set(motions) == set(walking_motions()) | ACTION_NAMES | {"M000"}


@pytest.mark.parametrize("name", sorted(ACTION_NAMES))
def test_actions_end_with_return(name):
    assert action_motions()[name][-1] == ReturnCommand()


@pytest.mark.parametrize("name", sorted(ACTION_NAMES | {"M000"}))
def test_jump_targets_stay_inside_motion(name):
    motion = all_motions()[name]
    for index, command in enumerate(motion):
        if isinstance(command, JumpCommand):
            assert 0 <= index + command.dest < len(motion)


def test_main_motion_calls_every_other_motion_once():
    motions = all_motions()
    calls = [c for c in motions["M000"] if isinstance(c, CallCommand)]
    called = [c.dest for c in calls]
    expected = [m for name, m in motions.items() if name != "M000"]
    assert len(called) == len(expected)
    for motion in expected:
        assert called.count(motion) == 1


def test_main_motion_shape():
    main = all_motions()["M000"]
    assert main[0] == SetCommand(SetType.SPEED, (127,) * SERVO_NUM)
    assert main[2] == PosCommand(10, HOME_POSITIONS)
    assert main[3] == JumpCommand(Condition.BTN_OFF, int(Button.ALL), 0)
    # The final jump leads back to the button wait.
    last = main[-1]
    assert last.condition == Condition.NONE
    assert len(main) - 1 + last.dest == 3


def test_main_call_buttons():
    motions = all_motions()
    by_dest = {c.dest: c.param for c in motions["M000"] if isinstance(c, CallCommand)}
    assert by_dest[motions["M001"]] == Button.UP
    assert by_dest[motions["M201"]] == Button.L1
    assert by_dest[motions["M500"]] == Button.A | Button.L1 | Button.L2


def test_wave_loops_three_times():
    wave = action_motions()["M302"]
    assert wave[0] == CounterCommand(0, 3)
    assert any(c == JumpCommand(Condition.LOOP, 0, -4) for c in wave)


def test_main_waits_without_buttons():
    controller, _ = make_controller()
    controller.begin(all_motions()["M000"])
    for _ in range(300):
        controller.loop()
    assert controller.pc == 3
    assert controller.depth == 0


def test_main_calls_forward_walk_on_up():
    controller, _ = make_controller()
    motions = all_motions()
    controller.begin(motions["M000"])
    controller.set_button(Button.UP)
    for _ in range(300):
        controller.loop()
        if controller.depth:
            break
    assert controller.depth == 1
    assert controller.motion == motions["M001"]


def test_go_limp_frees_every_servo_and_waits():
    controller, servos = make_controller()
    controller.begin(action_motions()["M500"])
    controller.loop()
    assert all(servo.positions == [0] for servo in servos)
    for _ in range(10):
        controller.loop()
    assert controller.pc == 1


def test_guard_frees_only_leg_pitch_servos():
    free = action_motions()["M220"][2]
    assert free.frame == 0
    freed = [i for i, p in enumerate(free.positions) if p == POS_FREE]
    assert freed == list(range(8, 14))


def test_results_are_independent_copies():
    first = all_motions()
    first.pop("M000")
    assert "M000" in all_motions()