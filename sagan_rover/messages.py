"""Command and state messages exchanged with the four-wheel-steering rover."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Mapping, TypeVar

WHEEL_COUNT = 4

_T = TypeVar("_T")


def _four(factory: Callable[[], _T]) -> Any:
    return field(default_factory=lambda: [factory() for _ in range(WHEEL_COUNT)])


def _check_count(name: str, items: list) -> None:
    if len(items) != WHEEL_COUNT:
        raise ValueError(f"'{name}' must hold {WHEEL_COUNT} entries, got {len(items)}")


@dataclass
class WheelCmd:
    """Angular velocity set-point of one drive wheel (rad/s)."""

    angular_velocity: float = 0.0


@dataclass
class SteeringCmd:
    """Angular position set-point of one steering joint (rad)."""

    angular_position: float = 0.0


@dataclass
class SaganCmd:
    """Set-points for all four wheels and steering joints."""

    wheel_cmd: list[WheelCmd] = _four(WheelCmd)
    steering_cmd: list[SteeringCmd] = _four(SteeringCmd)

    def __post_init__(self) -> None:
        _check_count("wheel_cmd", self.wheel_cmd)
        _check_count("steering_cmd", self.steering_cmd)

    def to_dict(self) -> dict[str, list[dict[str, float]]]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SaganCmd":
        return cls(
            wheel_cmd=[WheelCmd(float(e["angular_velocity"])) for e in data["wheel_cmd"]],
            steering_cmd=[
                SteeringCmd(float(e["angular_position"])) for e in data["steering_cmd"]
            ],
        )


@dataclass
class WheelState:
    """Measured angular velocity of one drive wheel (rad/s)."""

    angular_velocity: float = 0.0


@dataclass
class SteeringState:
    """Measured angular position of one steering joint (rad)."""

    angular_position: float = 0.0


@dataclass
class SaganStates:
    """Measured state of all four wheels and steering joints."""

    wheel_state: list[WheelState] = _four(WheelState)
    steering_state: list[SteeringState] = _four(SteeringState)

    def __post_init__(self) -> None:
        _check_count("wheel_state", self.wheel_state)
        _check_count("steering_state", self.steering_state)

    def to_dict(self) -> dict[str, list[dict[str, float]]]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SaganStates":
        return cls(
            wheel_state=[
                WheelState(float(e["angular_velocity"])) for e in data["wheel_state"]
            ],
            steering_state=[
                SteeringState(float(e["angular_position"])) for e in data["steering_state"]
            ],
        )