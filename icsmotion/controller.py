"""Scheduler for ICS servos sharing one serial line."""

import time

import serial

_UINT32_MASK = 0xFFFFFFFF
_HALF_RANGE = _UINT32_MASK // 2


def _micros():
    return (time.monotonic_ns() // 1000) & _UINT32_MASK


def _elapsed(now, start):
    return (now - start) & _UINT32_MASK


class IcsController:
    """Owns a serial port and takes turns among the servos attached to it.

    ``port`` is a pyserial-like object with ``in_waiting``, ``read`` and
    ``write``. ``clock`` returns the time in microseconds; it may wrap at
    32 bits.

    Servos handed to :meth:`add_servo` take part in the asynchronous
    schedule through their ``is_receiving`` and ``requests`` attributes and
    their ``send_async``, ``receive_async`` and ``is_ready`` methods.
    """

    def __init__(self, port, clock=None):
        self.port = port
        self.clock = clock or _micros
        self.on_error = None
        self.wait_us = 0
        self._servos = []
        self._current = 0
        self._waiting = False
        self._wait_start = 0
        self._timeout_start = 0
        self._timeout_limit = 0

    @property
    def servos(self):
        """The attached servos, in scheduling order."""
        return tuple(self._servos)

    def begin(self, baud=115200):
        """Configure the port for ICS: 8 data bits, even parity, 1 stop bit."""
        # The servo needs a pause after each exchange: six 11-bit characters plus margin.
        self.wait_us = 6 * 11 * 1_000_000 // baud + 400
        self.port.baudrate = baud
        self.port.bytesize = serial.EIGHTBITS
        self.port.parity = serial.PARITY_EVEN
        self.port.stopbits = serial.STOPBITS_ONE
        if getattr(self.port, "is_open", True) is False:
            self.port.open()

    def loop(self):
        """Advance asynchronous communication by one step; call repeatedly."""
        if self._waiting:
            elapsed = _elapsed(self.clock(), self._wait_start)
            if self.wait_us < elapsed < _HALF_RANGE:
                self._waiting = False
        if self._waiting or not self._servos:
            return

        servo = self._servos[self._current]
        if servo.is_receiving:
            servo.receive_async()
        elif servo.requests:
            servo.send_async()
            self._waiting = True
            self._wait_start = self.clock()
        else:
            self._current = (self._current + 1) % len(self._servos)

    def is_ready(self):
        """True when every attached servo has finished its requests."""
        return all(servo.is_ready() for servo in self._servos)

    def add_servo(self, servo):
        """Append a servo to the scheduling order."""
        self._servos.append(servo)

    def write(self, data):
        """Drop unread input, then send ``data``; return the count written."""
        while self.port.in_waiting > 0:
            self.port.read(self.port.in_waiting)
        return self.port.write(bytes(data))

    def read_available(self):
        """Return whatever bytes have arrived, possibly none."""
        count = self.port.in_waiting
        return bytes(self.port.read(count)) if count > 0 else b""

    def set_timeout(self, msec):
        """Start a time limit of ``msec`` milliseconds."""
        self._timeout_start = self.clock()
        self._timeout_limit = (msec * 1000) & _UINT32_MASK

    def is_timeout(self):
        """True once the time limit set by :meth:`set_timeout` has passed."""
        elapsed = _elapsed(self.clock(), self._timeout_start)
        return self._timeout_limit < elapsed < _HALF_RANGE