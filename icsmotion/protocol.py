"""Constants, errors and framing helpers of the ICS 3.5 serial servo protocol."""

from enum import IntEnum

CMD_MASK = 0xE0
ID_MASK = 0x1F
MSB_MASK = 0x7F

# Sub commands of the ID command.
SC_READ_ID = 0x00
SC_WRITE_ID = 0x01

TX_BUFF_SIZE = 3
RX_BUFF_SIZE = 3


class ErrorCode(IntEnum):
    """Error codes reported by servo communication."""

    TIMEOUT = 0x01
    VERIFY = 0x02
    ABNORMAL = 0x03
    UNATTACHED = 0x04


class Command(IntEnum):
    """Command field (upper three bits) of the first byte of a frame."""

    POSITION = 0x80
    READ = 0xA0
    WRITE = 0xC0
    ID = 0xE0


class SubCommand(IntEnum):
    """Sub command of the READ and WRITE commands."""

    EEPROM = 0x00
    STRETCH = 0x01
    SPEED = 0x02
    CURRENT = 0x03
    TEMPERATURE = 0x04
    POSITION = 0x05


_MESSAGES = {
    ErrorCode.TIMEOUT: "servo did not answer in time",
    ErrorCode.VERIFY: "servo response does not match the command",
    ErrorCode.ABNORMAL: "servo communication reached an abnormal state",
    ErrorCode.UNATTACHED: "servo is not attached to a controller",
}


class IcsError(Exception):
    """Failure of a servo transaction, carrying an ErrorCode."""

    def __init__(self, code, message=None):
        self.code = ErrorCode(code)
        super().__init__(message or _MESSAGES[self.code])


class IcsTimeoutError(IcsError):
    """The servo did not answer before the time limit."""

    def __init__(self, message=None):
        super().__init__(ErrorCode.TIMEOUT, message)


class IcsVerifyError(IcsError):
    """The servo's answer did not match the command sent."""

    def __init__(self, message=None):
        super().__init__(ErrorCode.VERIFY, message)


class IcsUnattachedError(IcsError):
    """The servo has no controller to talk through."""

    def __init__(self, message=None):
        super().__init__(ErrorCode.UNATTACHED, message)


_ERROR_CLASSES = {
    ErrorCode.TIMEOUT: IcsTimeoutError,
    ErrorCode.VERIFY: IcsVerifyError,
    ErrorCode.UNATTACHED: IcsUnattachedError,
}


def error_for_code(code):
    """Return the exception instance matching an error code.

    Raises ValueError for a code that is not an ErrorCode.
    """
    code = ErrorCode(code)
    error_class = _ERROR_CLASSES.get(code)
    if error_class is None:
        return IcsError(code)
    return error_class()


def encode_position(servo_id, pos):
    """Build the three-byte POSITION frame for a servo and a 14-bit target."""
    return bytes(
        (
            Command.POSITION | (servo_id & ID_MASK),
            (pos >> 7) & 0x7F,
            pos & 0x7F,
        )
    )


def decode_position(high, low):
    """Combine the upper and lower 7-bit halves of a position value."""
    return ((high << 7) | low) & 0xFFFF