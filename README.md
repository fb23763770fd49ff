# icsmotion

Drive ICS serial servos and play back motion sequences on a small
humanoid robot with sixteen servos. One serial line carries the
right-side servos and a second line carries the left-side servos.

## Modules

- `icsmotion.protocol` holds the protocol definitions.
  - `Command`, `SubCommand` and `ErrorCode` are the command, sub-command and error codes.
  - The exceptions are `IcsError`, `IcsTimeoutError`, `IcsVerifyError` and `IcsUnattachedError`. Each one carries a `code`.
  - `error_for_code` maps an error code to an exception.
  - `encode_position` and `decode_position` convert 14-bit positions.
- `icsmotion.controller`: `IcsController` owns one pyserial-like port,
  which needs `in_waiting`, `read` and `write`.
  - `begin(baud)` sets the port to 8 data bits, even parity and 1 stop bit. It opens the port if the port is closed.
  - `add_servo` adds a servo to the list of attached servos.
  - `loop()` steps the asynchronous requests, taking the servos in turn.
  - `is_ready()` reports whether all requests are finished.
  - `on_error`, if set, is called as `on_error(error_code, servo_id)` when an asynchronous exchange fails.
- `icsmotion.servo`: `IcsServo`. Call `attach(controller, servo_id)` to
  connect it to a controller.
  - The synchronous calls are:
    - `set_position`, which returns the position the servo reports
    - `get_position`
    - `get_stretch`, `get_speed`, `get_current` and `get_temperature`
    - `set_stretch`, `set_speed`, `set_current` and `set_temperature`
    - `read_eeprom`, which returns 64 bytes, and `write_eeprom`, which takes exactly 64 bytes
    - `read_id` and `write_id`, for a line with a single servo only
  - Failures of the synchronous calls are raised as `IcsError` subclasses.
  - The asynchronous calls are `request_position`, `request_current` and `request_temperature`.
    - The controller's `loop()` sends the requests and reads the answers.
    - Results are stored in `position` and `temperature`. Failures are stored in `error`.
- `icsmotion.motion` holds the motion engine.
  - The command types are `PosCommand`, `SetCommand`, `CounterCommand`, `JumpCommand`, `CallCommand`, `ReturnCommand`, `HaltCommand` and `WaitCommand`.
  - `Button`, `Condition` and `SetType` are the enums the commands use.
  - `MotionController(servos, clock=None, sleep=None)` takes exactly sixteen servos. `clock` returns microseconds and `sleep` takes seconds.
    - Set it up with `set_trim` and `set_home`.
    - `begin(motion)` selects the motion to run. `stand_trim()` and `stand_home()` move the servos to their trim and home positions.
    - Call `loop()` repeatedly. Each call runs one step of the current command. A frame lasts 15 ms.
    - `set_button`, `clear_button` and `move_button` change the button flags that jumps and calls test. Only one level of call is kept.
- `icsmotion.library_walk` and `icsmotion.library_main` hold the built-in motions.
  - `walking_motions()` returns the walking and turning motions.
  - `action_motions()` returns the getting-up, punching, guarding, greeting and exercise motions.
  - `all_motions()` returns every motion, keyed by name. This includes `M000`, the main motion, which calls the motion that matches the buttons held.
- `icsmotion.hexdec` converts between numbers and fixed-width decimal or hexadecimal text.
  - `dec_to_uint16` and `hex_to_uint16` parse text. They raise `ValueError` on a bad digit.
  - `uint16_to_dec` and `uint16_to_hex` format numbers.
- `icsmotion.app`: `Robot` puts two controllers, the sixteen servos and a
  `MotionController` together. The module's `main` is the command-line entry point.

## Installing

```
pip install .
```

## Running the robot

```
icsmotion RIGHT_PORT LEFT_PORT [--baud 115200]
```

For example:

```
icsmotion /dev/ttyUSB0 /dev/ttyUSB1
```

The command does the following:

1. Opens both serial ports.
2. Moves the robot to its home position.
3. Runs the main motion until it is interrupted with Ctrl-C.

Characters read from standard input press buttons. Standard input is
usually line-buffered, so a key takes effect once Enter is pressed.

| Key | Button |
| --- | --- |
| `1` | L1 |
| `2` | L2 |
| `3` | R1 |
| `4` | R2 |
| `a` | ← |
| `s` | ↓ |
| `d` | ↑ |
| `f` | → |
| `h` | X |
| `j` | A |
| `k` | Y |
| `l` | B |

A space releases all buttons. Any other character is ignored.

## Using the library

```python
import serial
from icsmotion.app import Robot

right = serial.Serial()
right.port = "/dev/ttyUSB0"
left = serial.Serial()
left.port = "/dev/ttyUSB1"

robot = Robot(right, left)
robot.setup()          # opens the ports and glides to the home pose
robot.handle_key("d")  # press "up": walk forward
while True:
    robot.loop()
```

Keys can also be queued on `robot.keys`. `loop()` takes one queued key
on each call.

To drive a single servo:

```python
import serial
from icsmotion.controller import IcsController
from icsmotion.servo import IcsServo

controller = IcsController(serial.Serial("/dev/ttyUSB0"))
controller.begin(115200)
servo = IcsServo()
servo.attach(controller, 1)
print(servo.set_position(7500))
```

## What it does not do

- Buttons come only from standard input, `Robot.handle_key` or the `MotionController` button methods. There is no network or gamepad input.
- Motions are the built-in Python data. There is no loading or saving of motion files.

## Tests

```
pip install .[test]
pytest
```