"""Drive controller for a rover with four steered, driven wheels.

The controller takes wheel velocity and steering angle set-points, runs a
simple actuator emulation and writes the results to eight command
interfaces, publishing the measured joint states after every cycle.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Mapping, Optional, Sequence

from .messages import WHEEL_COUNT, SaganCmd, SaganStates

logger = logging.getLogger(__name__)

WHEEL_GAIN = 0.06916
STEERING_GAIN = 2.188

WHEEL_JOINT_PARAMETERS = (
    "front_left_wheel_joint",
    "front_right_wheel_joint",
    "rear_left_wheel_joint",
    "rear_right_wheel_joint",
)
STEERING_JOINT_PARAMETERS = (
    "front_left_steering_joint",
    "front_right_steering_joint",
    "rear_left_steering_joint",
    "rear_right_steering_joint",
)
_INTERFACE_PARAMETERS = (
    "command_interfaces",
    "wheel_command_interfaces",
    "steering_command_interfaces",
    "state_interfaces",
)


class ControllerError(Exception):
    """Raised when the controller cannot be configured, activated or run."""


class InterfaceType(str, Enum):
    POSITION = "position"
    VELOCITY = "velocity"
    EFFORT = "effort"


ALLOWED_STATE_INTERFACE_TYPES = tuple(t.value for t in InterfaceType)
ALLOWED_COMMAND_INTERFACE_TYPES = tuple(t.value for t in InterfaceType)


@dataclass
class InterfaceConfiguration:
    """Interface names a controller claims, in the order it expects them."""

    names: list[str] = field(default_factory=list)
    type: str = "individual"


@dataclass
class _LoanedInterface:
    name: str
    value: float = 0.0

    @property
    def prefix_name(self) -> str:
        return self.name.rpartition("/")[0]

    @property
    def interface_name(self) -> str:
        return self.name.rpartition("/")[2]


class CommandInterface(_LoanedInterface):
    """A writable hardware value such as a joint velocity command."""

    def set_value(self, value: float) -> bool:
        self.value = float(value)
        return True


class StateInterface(_LoanedInterface):
    """A readable hardware value such as a measured joint position."""

    def get_value(self) -> float:
        return self.value


def _ordered_interfaces(
    interfaces: Sequence[StateInterface], joint_names: Sequence[str], interface_type: str
) -> list[StateInterface]:
    ordered = [
        iface
        for joint in joint_names
        for iface in interfaces
        if iface.name == f"{joint}/{interface_type}"
    ]
    if len(ordered) != len(joint_names):
        raise ControllerError(
            f"Expected {len(joint_names)} '{interface_type}' state interfaces, "
            f"got {len(ordered)}."
        )
    return ordered


class SaganDriveController:
    """Four-wheel-steering controller with first-order actuator emulation."""

    def __init__(self, publish: Optional[Callable[[SaganStates], None]] = None) -> None:
        self._publish = publish
        self._lock = threading.Lock()
        self._declared: Optional[dict[str, list[str]]] = None
        self.joints: dict[str, list[str]] = {
            name: [] for name in WHEEL_JOINT_PARAMETERS + STEERING_JOINT_PARAMETERS
        }
        self.command_interface_types: list[str] = []
        self.wheel_command_interface_types: list[str] = []
        self.steering_command_interface_types: list[str] = []
        self.state_interface_types: list[str] = []
        self.command_interfaces: list[CommandInterface] = []
        self.joint_state_interfaces: dict[str, list[StateInterface]] = {}
        self.states = SaganStates()
        self.active = False
        self._reset_signals()

    def _reset_signals(self) -> None:
        zeros = [0.0] * WHEEL_COUNT
        self.wheel_command = list(zeros)
        self.steering_command = list(zeros)
        self.wheel_velocity_reference = list(zeros)
        self.wheel_velocity_error = list(zeros)
        self.wheel_velocity_previous = list(zeros)
        self.steering_position_reference = list(zeros)
        self.steering_position_error = list(zeros)
        self.steering_position_previous = list(zeros)

    def on_init(self) -> None:
        """Declare the controller's parameters with their current values as defaults."""
        declared = {name: list(value) for name, value in self.joints.items()}
        declared["command_interfaces"] = list(self.command_interface_types)
        declared["wheel_command_interfaces"] = list(self.wheel_command_interface_types)
        declared["steering_command_interfaces"] = list(self.steering_command_interface_types)
        declared["state_interfaces"] = list(self.state_interface_types)
        self._declared = declared

    def on_configure(self, parameters: Mapping[str, Iterable[str]]) -> None:
        """Read joint and interface parameters and check them."""
        if self._declared is None:
            raise ControllerError("parameters have not been declared; call on_init first")
        values = dict(self._declared)
        for key, value in parameters.items():
            if key not in values:
                raise ControllerError(f"parameter '{key}' has not been declared")
            values[key] = list(value)

        for name in self.joints:
            self.joints[name] = list(values[name])

        if not self.wheel_command_interface_types:
            self.wheel_command_interface_types = list(values["wheel_command_interfaces"])
        if not self.wheel_command_interface_types:
            raise ControllerError("'w_command_interfaces' parameter is empty.")

        if not self.steering_command_interface_types:
            self.steering_command_interface_types = list(values["steering_command_interfaces"])
        if not self.steering_command_interface_types:
            raise ControllerError("'s_command_interfaces' parameter is empty.")

        if not self.command_interface_types:
            self.command_interface_types = list(values["command_interfaces"])
        if not self.command_interface_types:
            raise ControllerError("'command_interfaces' parameter is empty.")

        for interface in self.command_interface_types:
            if interface not in ALLOWED_COMMAND_INTERFACE_TYPES:
                raise ControllerError(
                    f"Command interface type '{interface}' not allowed! "
                    "Only effort type is allowed!"
                )

        self.state_interface_types = list(values["state_interfaces"])
        if not self.state_interface_types:
            raise ControllerError("'state_interfaces' parameter is empty.")

        logger.info(
            "Command interfaces are [%s] and and state interfaces are [%s].",
            " ".join(self.command_interface_types),
            " ".join(self.state_interface_types),
        )

    def _joint_names(self, parameters: Sequence[str]) -> list[str]:
        names = []
        for parameter in parameters:
            joint = self.joints[parameter]
            if not joint:
                raise ControllerError(f"'{parameter}' parameter is empty.")
            names.append(joint[0])
        return names

    @property
    def wheel_joint_names(self) -> list[str]:
        return self._joint_names(WHEEL_JOINT_PARAMETERS)

    @property
    def steering_joint_names(self) -> list[str]:
        return self._joint_names(STEERING_JOINT_PARAMETERS)

    def command_interface_configuration(self) -> InterfaceConfiguration:
        names = [
            f"{joint}/{kind}"
            for joint in self.wheel_joint_names
            for kind in self.wheel_command_interface_types
        ]
        names += [
            f"{joint}/{kind}"
            for joint in self.steering_joint_names
            for kind in self.steering_command_interface_types
        ]
        return InterfaceConfiguration(names)

    def state_interface_configuration(self) -> InterfaceConfiguration:
        joints = self.wheel_joint_names + self.steering_joint_names
        return InterfaceConfiguration(
            [f"{joint}/{kind}" for joint in joints for kind in self.state_interface_types]
        )

    def on_activate(
        self,
        command_interfaces: Iterable[CommandInterface],
        state_interfaces: Iterable[StateInterface],
    ) -> None:
        """Take the loaned interfaces, reset all signals and order the state interfaces."""
        logger.info("Activating")
        joint_names = self.wheel_joint_names + self.steering_joint_names
        self.command_interfaces = list(command_interfaces)
        states = list(state_interfaces)
        with self._lock:
            self._reset_signals()

        ordered: dict[str, list[StateInterface]] = {}
        for interface in self.state_interface_types:
            if interface not in ALLOWED_STATE_INTERFACE_TYPES:
                raise ControllerError(f"State interface type '{interface}' not allowed!")
            ordered[interface] = _ordered_interfaces(states, joint_names, interface)
        self.joint_state_interfaces = ordered
        self.active = True

    def on_deactivate(self) -> None:
        logger.debug("Deactivating")
        self.active = False

    def on_command(self, msg: SaganCmd) -> None:
        """Store new wheel velocity and steering position references."""
        with self._lock:
            for index in range(WHEEL_COUNT):
                self.wheel_velocity_reference[index] = msg.wheel_cmd[index].angular_velocity
                self.steering_position_reference[index] = msg.steering_cmd[
                    index
                ].angular_position

    def update(self) -> None:
        """Run one control cycle."""
        self.steering_emulator_update()
        self.wheel_emulator_update()
        self.command_interfaces_update()
        self.states_publisher()

    def command_interfaces_update(self) -> None:
        """Write wheel and steering commands; rear steering is mirrored."""
        if len(self.command_interfaces) < 2 * WHEEL_COUNT:
            raise ControllerError(
                f"Expected {2 * WHEEL_COUNT} command interfaces, "
                f"got {len(self.command_interfaces)}."
            )
        steering = self.steering_command
        values = self.wheel_command + [steering[0], steering[1], -steering[2], -steering[3]]
        for index, (interface, value) in enumerate(zip(self.command_interfaces, values)):
            if not interface.set_value(value):
                logger.error("Failed to set value for command interface %d", index)

    def _state_values(self, interface: InterfaceType, offset: int) -> list[float]:
        ordered = self.joint_state_interfaces.get(interface.value)
        if ordered is None:
            raise ControllerError(f"'{interface.value}' state interfaces are not available")
        return [iface.get_value() for iface in ordered[offset : offset + WHEEL_COUNT]]

    def states_publisher(self) -> None:
        """Read joint states into the state message and publish it."""
        with self._lock:
            velocities = self._state_values(InterfaceType.VELOCITY, 0)
            positions = self._state_values(InterfaceType.POSITION, WHEEL_COUNT)
            for wheel, steering, velocity, position in zip(
                self.states.wheel_state, self.states.steering_state, velocities, positions
            ):
                wheel.angular_velocity = velocity
                steering.angular_position = position
            if self._publish is not None:
                self._publish(copy.deepcopy(self.states))

    def wheel_emulator_update(self) -> None:
        for index, state in enumerate(self.states.wheel_state):
            error = self.wheel_velocity_reference[index] - state.angular_velocity
            self.wheel_velocity_error[index] = error
            command = self.wheel_velocity_previous[index] + WHEEL_GAIN * error
            self.wheel_command[index] = command
            self.wheel_velocity_previous[index] = command

    def steering_emulator_update(self) -> None:
        for index, state in enumerate(self.states.steering_state):
            reference = self.steering_position_reference[index]
            # Rear joints are mounted mirrored, so their measurement enters with opposite sign.
            if index < 2:
                error = reference - state.angular_position
            else:
                error = reference + state.angular_position
            self.steering_position_error[index] = error
            command = STEERING_GAIN * error
            self.steering_command[index] = command
            self.steering_position_previous[index] = command