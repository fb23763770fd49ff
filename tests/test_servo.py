import pytest

from icsmotion.controller import IcsController
from icsmotion.protocol import (
    Command,
    ErrorCode,
    IcsTimeoutError,
    IcsUnattachedError,
    IcsVerifyError,
    SubCommand,
    decode_position,
    encode_position,
)
from icsmotion.servo import IcsServo


class FakePort:
    def __init__(self, responder=None):
        self.responder = responder
        self.written = []
        self.inbox = bytearray()

    @property
    def in_waiting(self):
        return len(self.inbox)

    def read(self, size=1):
        data = bytes(self.inbox[:size])
        del self.inbox[:size]
        return data

    def write(self, data):
        data = bytes(data)
        self.written.append(data)
        if self.responder is not None:
            self.inbox += self.responder(data)
        return len(data)


class FakeClock:
    def __init__(self, step=100):
        self.now = 0
        self.step = step

    def __call__(self):
        value = self.now
        self.now += self.step
        return value


def answering(build):
    """Responder that echoes the frame (loopback) and appends the servo's reply."""
    return lambda frame: frame + bytes(build(frame))


def make_servo(responder=None, servo_id=1):
    port = FakePort(responder)
    controller = IcsController(port, clock=FakeClock())
    errors = []
    controller.on_error = lambda code, sid: errors.append((code, sid))
    servo = IcsServo()
    servo.attach(controller, servo_id)
    return servo, port, controller, errors


def test_attach_registers_servos_in_order():
    port = FakePort()
    controller = IcsController(port, clock=FakeClock())
    first, second = IcsServo(), IcsServo()
    first.attach(controller, 3)
    second.attach(controller, 4)
    assert controller.servos == (first, second)
    assert (first.servo_id, second.servo_id) == (3, 4)
    assert first.controller is controller


def test_set_position_sends_frame_and_returns_reported_position():
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, 0x3A, 0x4C)), 1)
    assert servo.set_position(7500) == decode_position(0x3A, 0x4C)
    assert port.written == [encode_position(1, 7500)]


def test_set_position_rejects_wrong_command_echo():
    servo, _, _, _ = make_servo(answering(lambda f: ((f[0] + 1) & 0x7F, 0, 0)))
    with pytest.raises(IcsVerifyError):
        servo.set_position(7500)
    assert servo.error == 0


def test_sync_timeout_sets_error_and_notifies():
    servo, _, _, errors = make_servo(None, servo_id=6)
    with pytest.raises(IcsTimeoutError):
        servo.get_speed()
    assert servo.error == ErrorCode.TIMEOUT
    assert errors == [(ErrorCode.TIMEOUT, 6)]


def test_unattached_sync_call_raises():
    servo = IcsServo()
    with pytest.raises(IcsUnattachedError):
        servo.get_stretch()
    assert servo.error == ErrorCode.UNATTACHED


@pytest.mark.parametrize(
    "method, sub_command",
    [
        ("get_stretch", SubCommand.STRETCH),
        ("get_speed", SubCommand.SPEED),
        ("get_current", SubCommand.CURRENT),
        ("get_temperature", SubCommand.TEMPERATURE),
    ],
)
def test_get_parameter(method, sub_command):
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1], 42)), 2)
    assert getattr(servo, method)() == 42
    assert port.written == [bytes((Command.READ | 2, sub_command))]


def test_get_parameter_rejects_wrong_sub_command():
    servo, _, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1] + 1, 42)))
    with pytest.raises(IcsVerifyError):
        servo.get_speed()


def test_get_position():
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1], 0x20, 0x11)), 4)
    assert servo.get_position() == decode_position(0x20, 0x11)
    assert port.written == [bytes((Command.READ | 4, SubCommand.POSITION))]


@pytest.mark.parametrize(
    "method, sub_command",
    [
        ("set_stretch", SubCommand.STRETCH),
        ("set_speed", SubCommand.SPEED),
        ("set_current", SubCommand.CURRENT),
        ("set_temperature", SubCommand.TEMPERATURE),
    ],
)
def test_set_parameter(method, sub_command):
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1], f[2])), 5)
    getattr(servo, method)(65)
    assert port.written == [bytes((Command.WRITE | 5, sub_command, 65))]


def test_set_parameter_rejects_wrong_data_echo():
    servo, _, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1], f[2] ^ 1)))
    with pytest.raises(IcsVerifyError):
        servo.set_stretch(60)
    assert servo.error == 0


def test_read_eeprom_returns_64_bytes():
    contents = bytes(range(64))
    servo, port, _, _ = make_servo(answering(lambda f: bytes((f[0] & 0x7F, f[1])) + contents), 1)
    assert servo.read_eeprom() == contents
    assert port.written == [bytes((Command.READ | 1, SubCommand.EEPROM))]


def test_write_eeprom_sends_data():
    contents = bytes(range(100, 164))
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1])), 1)
    servo.write_eeprom(contents)
    assert port.written == [bytes((Command.WRITE | 1, SubCommand.EEPROM)) + contents]


def test_write_eeprom_rejects_wrong_length():
    servo, port, _, _ = make_servo()
    with pytest.raises(ValueError):
        servo.write_eeprom(b"\x00" * 10)
    assert port.written == []


def test_read_id():
    servo, port, _, _ = make_servo(answering(lambda f: (Command.ID | 5,)))
    assert servo.read_id() == 5
    assert port.written == [bytes((Command.ID, 0, 0, 0))]


def test_read_id_rejects_non_id_answer():
    servo, _, _, _ = make_servo(answering(lambda f: (0x05,)))
    with pytest.raises(IcsVerifyError):
        servo.read_id()


def test_write_id():
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F,)))
    servo.write_id(7)
    assert port.written == [bytes((Command.ID | 7, 1, 1, 1))]


def test_async_position_round_trip():
    servo, port, _, errors = make_servo(answering(lambda f: (f[0] & 0x7F, f[1], f[2])), 3)
    servo.request_position(8000)
    assert not servo.is_ready()
    servo.send_async()
    assert port.written == [encode_position(3, 8000)]
    assert servo.is_receiving
    servo.receive_async()
    assert servo.position == 8000
    assert servo.is_ready()
    assert servo.error == 0
    assert errors == []


def test_async_position_reply_in_pieces():
    servo, port, _, _ = make_servo(lambda f: f, 2)
    servo.request_position(7000)
    servo.send_async()
    servo.receive_async()
    assert servo.is_receiving
    frame = port.written[-1]
    port.inbox += bytes((frame[0] & 0x7F, frame[1], frame[2]))
    servo.receive_async()
    assert servo.position == 7000
    assert not servo.is_receiving


def test_async_temperature():
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1], 37)), 2)
    servo.request_temperature()
    servo.send_async()
    assert port.written == [bytes((Command.READ | 2, SubCommand.TEMPERATURE))]
    servo.receive_async()
    assert servo.temperature == 37
    assert servo.is_ready()


def test_async_current_request_asks_for_stretch():
    servo, port, _, _ = make_servo(answering(lambda f: (f[0] & 0x7F, f[1], 33)), 2)
    servo.request_current()
    servo.send_async()
    assert port.written == [bytes((Command.READ | 2, SubCommand.STRETCH))]
    servo.receive_async()
    assert servo.current == 0
    assert servo.is_ready()


def test_async_position_has_priority():
    servo, port, _, _ = make_servo(None, 1)
    servo.request_temperature()
    servo.request_position(7500)
    servo.send_async()
    servo.send_async()
    assert port.written == [
        encode_position(1, 7500),
        bytes((Command.READ | 1, SubCommand.TEMPERATURE)),
    ]


def test_async_loopback_mismatch_reports_verify_error():
    servo, _, _, errors = make_servo(lambda f: bytes((f[0] ^ 1,)), 9)
    servo.request_position(7500)
    servo.send_async()
    servo.receive_async()
    assert servo.error == ErrorCode.VERIFY
    assert not servo.is_receiving
    assert errors == [(ErrorCode.VERIFY, 9)]


def test_async_timeout():
    servo, _, _, errors = make_servo(None, 4)
    servo.request_position(7500)
    servo.send_async()
    for _ in range(100):
        if not servo.is_receiving:
            break
        servo.receive_async()
    assert servo.error == ErrorCode.TIMEOUT
    assert errors == [(ErrorCode.TIMEOUT, 4)]


def test_request_clears_previous_error():
    servo, _, _, _ = make_servo(None)
    with pytest.raises(IcsTimeoutError):
        servo.get_speed()
    servo.request_position(7500)
    assert servo.error == 0


def test_unattached_async_send_sets_error():
    servo = IcsServo()
    servo.request_position(7500)
    servo.send_async()
    assert servo.error == ErrorCode.UNATTACHED
    assert not servo.is_receiving


def test_controller_loop_serves_all_servos():
    port = FakePort(answering(lambda f: (f[0] & 0x7F, f[1], f[2])))
    controller = IcsController(port, clock=FakeClock())
    first, second = IcsServo(), IcsServo()
    first.attach(controller, 1)
    second.attach(controller, 2)
    first.request_position(7100)
    second.request_position(7900)
    assert not controller.is_ready()
    for _ in range(50):
        if controller.is_ready():
            break
        controller.loop()
    assert controller.is_ready()
    assert (first.position, second.position) == (7100, 7900)