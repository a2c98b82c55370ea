# sagan-rover

Drive control, command generation and dead-reckoning odometry for a rover
with four driven, independently steered wheels. Pure Python, no
dependencies outside the standard library.

## Modules

- `sagan_rover.messages` – the messages passed between the parts.
  `SaganCmd` holds four `WheelCmd` (`angular_velocity`, rad/s) and four
  `SteeringCmd` (`angular_position`, rad) entries; `SaganStates` holds four
  `WheelState` and four `SteeringState` entries. Each message must hold
  exactly four entries per list (otherwise `ValueError`), and converts to and
  from plain dictionaries with `to_dict()` / `from_dict()`.
- `sagan_rover.controller` – `SaganDriveController`, a drive controller with
  an `on_init` / `on_configure` / `on_activate` / `on_deactivate` life cycle.
  It works out the names of the command and state interfaces it needs,
  takes wheel velocity and steering position references from `SaganCmd`
  messages (`on_command`), and on every `update()` runs a simple emulated
  control law (wheel gain 0.06916, steering gain 2.188), writes eight
  command values (rear steering mirrored) and publishes the measured joint
  states as a `SaganStates`. Problems with parameters or interfaces raise
  `ControllerError`. Allowed interface types are those of `InterfaceType`:
  `position`, `velocity`, `effort`.
- `sagan_rover.commander` – `CommandPublisher`, which builds the fixed command
  from `default_command()` (all wheels at 10 rad/s, steering straight) and
  hands it to a callback each time `publish_message()` is called.
- `sagan_rover.odometry` – `SaganOdometry`, which takes wheel speeds and
  steering angles through `state_callback()` and, on every `step()`,
  advances the planar pose by a fixed 10 ms time step and returns an
  `OdometryEstimate` (position, heading, velocities, orientation as a
  `Quaternion`, frames `odom` → `base_footprint`). `quaternion_from_yaw()`
  turns a heading into a normalised `Quaternion`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
sagan-commander [--period SECONDS] [--count N]
```

writes the default drive command to standard output as one JSON line
(`{"wheel_cmd": [...], "steering_cmd": [...]}`) every `--period` seconds
(default 0.01). With `--count` it stops after N messages; otherwise it runs
until interrupted.

```
sagan-odometry < states.jsonl
```

reads `SaganStates` messages as JSON lines from standard input (the shape
`SaganStates.to_dict()` produces), advances the odometry by one step per
message and writes one JSON line per step with the fields of
`OdometryEstimate`. Blank lines are skipped; an invalid line stops it with
exit status 1. It takes no arguments.

## Library use

```python
from sagan_rover.commander import CommandPublisher, default_command
from sagan_rover.messages import SaganStates
from sagan_rover.odometry import SaganOdometry, quaternion_from_yaw

sent = []
publisher = CommandPublisher(sent.append)
publisher.publish_message()          # sent[0] == default_command()

states = SaganStates()
for wheel in states.wheel_state:
    wheel.angular_velocity = 10.0    # rad/s

odometry = SaganOdometry()
odometry.state_callback(states)
estimate = odometry.step()           # one 10 ms integration step

heading = quaternion_from_yaw(0.5)
```

The drive controller is given a callable for its state messages, configured
with a mapping of declared parameters, and activated with the command and
state interfaces it asks for:

```python
from sagan_rover.commander import default_command
from sagan_rover.controller import (
    CommandInterface,
    SaganDriveController,
    StateInterface,
)

published = []
controller = SaganDriveController(published.append)
controller.on_init()
controller.on_configure({
    "front_left_wheel_joint": ["fl_wheel"],
    "front_right_wheel_joint": ["fr_wheel"],
    "rear_left_wheel_joint": ["rl_wheel"],
    "rear_right_wheel_joint": ["rr_wheel"],
    "front_left_steering_joint": ["fl_steering"],
    "front_right_steering_joint": ["fr_steering"],
    "rear_left_steering_joint": ["rl_steering"],
    "rear_right_steering_joint": ["rr_steering"],
    "command_interfaces": ["velocity"],
    "wheel_command_interfaces": ["velocity"],
    "steering_command_interfaces": ["velocity"],
    "state_interfaces": ["position", "velocity"],
})

commands = [CommandInterface(name)
            for name in controller.command_interface_configuration().names]
states = [StateInterface(name)
          for name in controller.state_interface_configuration().names]
controller.on_activate(commands, states)

controller.on_command(default_command())
controller.update()                  # commands[i].value now hold the outputs
```

Publishing needs both `position` and `velocity` state interfaces.

## What this package does not do

There is no message transport: the commander writes to standard output, the
odometry reads standard input, and the controller and publishers work
through plain Python callbacks. Nothing here talks to motors or a
simulator — the controller's command and state interfaces are in-memory
values that the caller reads and fills in. The odometry computes poses but
does not broadcast coordinate transforms.