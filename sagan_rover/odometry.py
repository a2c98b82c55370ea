"""Dead-reckoning odometry from wheel velocities and steering angles."""

from __future__ import annotations

import json
import math
import sys
import time
from dataclasses import asdict, dataclass, field
from typing import Optional, Sequence

from .messages import WHEEL_COUNT, SaganStates

WHEEL_RADIUS = 0.06
WHEEL_BASE = 0.370
WHEEL_SEPARATION = 0.2975
TIME_STEP = 0.01
YAW_CORRECTION = 2.04203 * 1.002758041

ODOM_FRAME = "odom"
BASE_FRAME = "base_footprint"

# Wheel positions relative to the body centre: rear-left, rear-right, front-left, front-right.
_X_OFFSETS = (-WHEEL_BASE / 2, -WHEEL_BASE / 2, WHEEL_BASE / 2, WHEEL_BASE / 2)
_Y_OFFSETS = (
    -WHEEL_SEPARATION / 2,
    WHEEL_SEPARATION / 2,
    -WHEEL_SEPARATION / 2,
    WHEEL_SEPARATION / 2,
)


@dataclass(frozen=True)
class Quaternion:
    """Orientation as a unit quaternion."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0


def quaternion_from_yaw(yaw: float) -> Quaternion:
    """Return the normalised quaternion for a rotation of ``yaw`` about z."""
    z = math.sin(yaw / 2)
    w = math.cos(yaw / 2)
    norm = math.hypot(z, w)
    return Quaternion(0.0, 0.0, z / norm, w / norm)


@dataclass
class OdometryEstimate:
    """Pose and twist of the base in the odometry frame."""

    x: float
    y: float
    theta: float
    linear_x: float
    linear_y: float
    angular_z: float
    orientation: Quaternion
    z: float = 0.0
    frame_id: str = ODOM_FRAME
    child_frame_id: str = BASE_FRAME
    stamp: float = field(default_factory=time.time)


class SaganOdometry:
    """Integrates the rover pose from measured wheel and steering states."""

    def __init__(self) -> None:
        self.x = 0.0
        self.y = 0.0
        self.theta = 0.0
        self.last_x = 0.0
        self.last_y = 0.0
        self.last_theta = 0.0
        self.omega = [0.0] * WHEEL_COUNT
        self.delta = [0.0] * WHEEL_COUNT

    def state_callback(self, msg: SaganStates) -> None:
        """Store the latest wheel velocities and steering angles."""
        self.omega = [w.angular_velocity for w in msg.wheel_state]
        self.delta = [s.angular_position for s in msg.steering_state]

    def step(self) -> OdometryEstimate:
        """Advance the pose by one time step and return the new estimate."""
        self.last_x, self.last_y, self.last_theta = self.x, self.y, self.theta

        v_theta = sum(
            omega
            * WHEEL_RADIUS
            * (-y_sep * math.cos(delta) + x_sep * math.sin(delta))
            / (4 * x_sep * x_sep + 4 * y_sep * y_sep)
            for omega, delta, x_sep, y_sep in zip(
                self.omega, self.delta, _X_OFFSETS, _Y_OFFSETS
            )
        )
        self.theta += YAW_CORRECTION * v_theta * TIME_STEP

        vx = sum(
            omega * WHEEL_RADIUS * math.cos(delta + self.theta) / 4
            for omega, delta in zip(self.omega, self.delta)
        )
        vy = sum(
            omega * WHEEL_RADIUS * math.sin(delta + self.theta) / 4
            for omega, delta in zip(self.omega, self.delta)
        )
        self.x += vx * TIME_STEP
        self.y += vy * TIME_STEP

        return OdometryEstimate(
            x=self.x,
            y=self.y,
            theta=self.theta,
            linear_x=(self.x - self.last_x) / TIME_STEP,
            linear_y=(self.y - self.last_y) / TIME_STEP,
            angular_z=(self.theta - self.last_theta) / TIME_STEP,
            orientation=quaternion_from_yaw(self.theta),
        )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Read joint states as JSON lines on stdin and write one odometry line per state."""
    if argv:
        sys.stderr.write("usage: sagan-odometry < states.jsonl\n")
        return 2
    odometry = SaganOdometry()
    for number, line in enumerate(sys.stdin, start=1):
        if not line.strip():
            continue
        try:
            states = SaganStates.from_dict(json.loads(line))
        except (ValueError, KeyError, TypeError) as exc:
            sys.stderr.write(f"line {number}: invalid state message: {exc}\n")
            return 1
        odometry.state_callback(states)
        sys.stdout.write(json.dumps(asdict(odometry.step())) + "\n")
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())