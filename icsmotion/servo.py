"""A single ICS serial servo: synchronous commands and the asynchronous request cycle."""

from enum import IntFlag

from .protocol import (
    CMD_MASK,
    ID_MASK,
    MSB_MASK,
    SC_READ_ID,
    SC_WRITE_ID,
    Command,
    ErrorCode,
    IcsTimeoutError,
    IcsUnattachedError,
    IcsVerifyError,
    SubCommand,
    decode_position,
    encode_position,
)

EEPROM_SIZE = 64

_SHORT_TIMEOUT_MS = 1
_EEPROM_TIMEOUT_MS = 10


class _Request(IntFlag):
    POSITION = 0x01
    CURRENT = 0x02
    TEMPERATURE = 0x04


def _cmd_matches(rx, tx):
    n = len(tx)
    return rx[0] == tx[0] and (rx[n] & MSB_MASK) == (tx[0] & MSB_MASK)


def _sc_matches(rx, tx):
    n = len(tx)
    return rx[1] == tx[1] and rx[n + 1] == tx[1]


def _data_matches(rx, tx):
    n = len(tx)
    return rx[2] == tx[2] and rx[n + 2] == tx[2]


class IcsServo:
    """One servo on an ICS line.

    The synchronous methods block until the servo answers and raise an
    :class:`~icsmotion.protocol.IcsError` when it does not. The asynchronous
    ``request_*`` methods only record a request; the controller's loop then
    drives :meth:`send_async` and :meth:`receive_async`, and failures are
    reported through :attr:`error` and the controller's ``on_error`` callback.
    """

    def __init__(self):
        self.controller = None
        self.servo_id = 0
        self.pos_target = 0
        self.position = 0
        self.temperature = 0
        self.current = 0
        self.error = 0
        self.requests = _Request(0)
        self.is_receiving = False
        self._command = None
        self._tx = b""
        self._rx_count = 0
        self._rx_high = 0

    # Common API

    def attach(self, controller, servo_id):
        """Bind this servo to a controller under the given ID."""
        self.controller = controller
        self.servo_id = servo_id
        controller.add_servo(self)

    # Synchronous API

    def set_position(self, pos):
        """Move toward ``pos`` and return the position the servo reports."""
        tx = encode_position(self.servo_id, pos)
        rx = self._transfer(tx, 6, _SHORT_TIMEOUT_MS)
        if not _cmd_matches(rx, tx):
            raise IcsVerifyError()
        return decode_position(rx[4], rx[5])

    def get_stretch(self):
        """Read the stretch parameter."""
        return self._get_parameter(SubCommand.STRETCH)

    def get_speed(self):
        """Read the speed parameter."""
        return self._get_parameter(SubCommand.SPEED)

    def get_current(self):
        """Read the current value."""
        return self._get_parameter(SubCommand.CURRENT)

    def get_temperature(self):
        """Read the temperature value."""
        return self._get_parameter(SubCommand.TEMPERATURE)

    def get_position(self):
        """Read the current position without moving the servo."""
        tx = bytes((self._command_byte(Command.READ), SubCommand.POSITION))
        rx = self._transfer(tx, 6, _SHORT_TIMEOUT_MS)
        if not (_cmd_matches(rx, tx) and _sc_matches(rx, tx)):
            raise IcsVerifyError()
        return decode_position(rx[4], rx[5])

    def set_stretch(self, stretch):
        """Write the stretch parameter."""
        self._set_parameter(SubCommand.STRETCH, stretch)

    def set_speed(self, speed):
        """Write the speed parameter."""
        self._set_parameter(SubCommand.SPEED, speed)

    def set_current(self, current):
        """Write the current limit."""
        self._set_parameter(SubCommand.CURRENT, current)

    def set_temperature(self, temp):
        """Write the temperature limit."""
        self._set_parameter(SubCommand.TEMPERATURE, temp)

    def read_eeprom(self):
        """Return the servo's 64 bytes of EEPROM."""
        tx = bytes((self._command_byte(Command.READ), SubCommand.EEPROM))
        rx = self._transfer(tx, len(tx) + 2 + EEPROM_SIZE, _EEPROM_TIMEOUT_MS)
        if not (_cmd_matches(rx, tx) and _sc_matches(rx, tx)):
            raise IcsVerifyError()
        return rx[4 : 4 + EEPROM_SIZE]

    def write_eeprom(self, data):
        """Write 64 bytes of EEPROM data to the servo."""
        data = bytes(data)
        if len(data) != EEPROM_SIZE:
            raise ValueError(f"EEPROM data must be {EEPROM_SIZE} bytes, got {len(data)}")
        tx = bytes((self._command_byte(Command.WRITE), SubCommand.EEPROM)) + data
        rx = self._transfer(tx, len(tx) + 2, _EEPROM_TIMEOUT_MS)
        if not (_cmd_matches(rx, tx) and _sc_matches(rx, tx)):
            raise IcsVerifyError()

    def read_id(self):
        """Read the ID of the only servo on the line."""
        tx = bytes((Command.ID, SC_READ_ID, SC_READ_ID, SC_READ_ID))
        rx = self._transfer(tx, len(tx) + 1, _SHORT_TIMEOUT_MS)
        answer = rx[len(tx)]
        if not (rx[0] == tx[0] and (answer & CMD_MASK & MSB_MASK) == (Command.ID & MSB_MASK)):
            raise IcsVerifyError()
        return answer & ID_MASK

    def write_id(self, servo_id):
        """Give the only servo on the line a new ID."""
        tx = bytes(
            (Command.ID | (servo_id & ID_MASK), SC_WRITE_ID, SC_WRITE_ID, SC_WRITE_ID)
        )
        rx = self._transfer(tx, len(tx) + 1, _SHORT_TIMEOUT_MS)
        if not _cmd_matches(rx, tx):
            raise IcsVerifyError()

    # Asynchronous API

    def request_position(self, pos):
        """Ask for a move to ``pos``; the reported position lands in :attr:`position`."""
        self.error = 0
        self.pos_target = pos
        self.requests |= _Request.POSITION

    def request_current(self):
        """Ask for a current reading."""
        self.error = 0
        self.requests |= _Request.CURRENT

    def request_temperature(self):
        """Ask for a temperature reading; it lands in :attr:`temperature`."""
        self.error = 0
        self.requests |= _Request.TEMPERATURE

    def is_ready(self):
        """True when no request is pending and no answer is awaited."""
        return not self.requests and not self.is_receiving

    def send_async(self):
        """Send the most urgent pending request."""
        if self.controller is None:
            self._set_error(ErrorCode.UNATTACHED)
            return

        if self.requests & _Request.POSITION:
            self.requests &= ~_Request.POSITION
            self._command = Command.POSITION
            self._tx = encode_position(self.servo_id, self.pos_target)
        elif self.requests & _Request.CURRENT:
            self.requests &= ~_Request.CURRENT
            self._command = Command.READ
            # The current request asks for the stretch sub command.
            self._tx = bytes((self._command_byte(Command.READ), SubCommand.STRETCH))
        elif self.requests & _Request.TEMPERATURE:
            self.requests &= ~_Request.TEMPERATURE
            self._command = Command.READ
            self._tx = bytes((self._command_byte(Command.READ), SubCommand.TEMPERATURE))
        else:
            return

        self.controller.write(self._tx)
        self.is_receiving = True
        self._rx_count = 0
        self.controller.set_timeout(_SHORT_TIMEOUT_MS)

    def receive_async(self):
        """Consume whatever part of the answer has arrived."""
        if self.controller is None:
            self._set_error(ErrorCode.UNATTACHED)
            return
        if self._command == Command.POSITION:
            self._receive_position()
        elif self._command == Command.READ:
            self._receive_read()
        if self.controller.is_timeout():
            self._set_error(ErrorCode.TIMEOUT)

    # Internals

    def _command_byte(self, command):
        return command | (self.servo_id & ID_MASK)

    def _set_error(self, code):
        self.error = ErrorCode(code)
        self.is_receiving = False
        controller = self.controller
        if controller is not None and controller.on_error is not None:
            controller.on_error(self.error, self.servo_id)

    def _transfer(self, tx, rx_size, timeout_ms):
        controller = self.controller
        if controller is None:
            self._set_error(ErrorCode.UNATTACHED)
            raise IcsUnattachedError()
        controller.set_timeout(timeout_ms)
        controller.write(tx)
        received = bytearray()
        while True:
            received += controller.read_available()[: rx_size - len(received)]
            if controller.is_timeout():
                self._set_error(ErrorCode.TIMEOUT)
                raise IcsTimeoutError()
            if len(received) >= rx_size:
                return bytes(received)

    def _get_parameter(self, sc):
        tx = bytes((self._command_byte(Command.READ), sc))
        rx = self._transfer(tx, len(tx) + 3, _SHORT_TIMEOUT_MS)
        if not (_cmd_matches(rx, tx) and _sc_matches(rx, tx)):
            raise IcsVerifyError()
        return rx[4]

    def _set_parameter(self, sc, value):
        tx = bytes((self._command_byte(Command.WRITE), sc, value & 0xFF))
        rx = self._transfer(tx, len(tx) + 3, _SHORT_TIMEOUT_MS)
        if not (_cmd_matches(rx, tx) and _sc_matches(rx, tx) and _data_matches(rx, tx)):
            raise IcsVerifyError()

    def _receive_position(self):
        for byte in self.controller.read_available():
            count = self._rx_count
            if count <= 2:
                if byte != self._tx[count]:
                    self._set_error(ErrorCode.VERIFY)
                    return
            elif count == 3:
                if (byte & MSB_MASK) != (self._tx[0] & MSB_MASK):
                    self._set_error(ErrorCode.VERIFY)
                    return
            elif count == 4:
                self._rx_high = byte
            elif count == 5:
                self.position = decode_position(self._rx_high, byte)
                self.is_receiving = False
                return
            else:
                self._set_error(ErrorCode.ABNORMAL)
                return
            self._rx_count += 1

    def _receive_read(self):
        for byte in self.controller.read_available():
            count = self._rx_count
            if count <= 1:
                if byte != self._tx[count]:
                    self._set_error(ErrorCode.VERIFY)
                    return
            elif count == 2:
                if (byte & MSB_MASK) != (self._tx[0] & MSB_MASK):
                    self._set_error(ErrorCode.VERIFY)
                    return
            elif count == 3:
                if byte != self._tx[1]:
                    self._set_error(ErrorCode.VERIFY)
                    return
            elif count == 4:
                sub_command = self._tx[1]
                if sub_command == SubCommand.CURRENT:
                    self.current = byte
                elif sub_command == SubCommand.TEMPERATURE:
                    self.temperature = byte
                self.is_receiving = False
                return
            else:
                self._set_error(ErrorCode.ABNORMAL)
                return
            self._rx_count += 1