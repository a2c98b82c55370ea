import io
import json
import math

import pytest

from sagan_rover.messages import SaganStates, SteeringState, WheelState
from sagan_rover.odometry import (
    Quaternion,
    SaganOdometry,
    TIME_STEP,
    main,
    quaternion_from_yaw,
)


def _states(omegas, deltas):
    return SaganStates(
        wheel_state=[WheelState(o) for o in omegas],
        steering_state=[SteeringState(d) for d in deltas],
    )


def _yaw(q):
    return math.atan2(2 * q.w * q.z, 1 - 2 * q.z * q.z)


def test_quaternion_from_zero_yaw_is_identity():
    assert quaternion_from_yaw(0.0) == Quaternion(0.0, 0.0, 0.0, 1.0)


@pytest.mark.parametrize("yaw", [-2.5, -0.3, 0.7, 1.9, 3.0])
def test_quaternion_is_unit_and_recovers_yaw(yaw):
    q = quaternion_from_yaw(yaw)
    assert math.isclose(q.x**2 + q.y**2 + q.z**2 + q.w**2, 1.0)
    assert _yaw(q) == pytest.approx(yaw)


def test_step_at_rest_stays_at_origin():
    odom = SaganOdometry()
    est = odom.step()
    assert (est.x, est.y, est.theta) == (0.0, 0.0, 0.0)
    assert est.orientation == Quaternion()
    assert est.frame_id == "odom"
    assert est.child_frame_id == "base_footprint"


def test_straight_drive_moves_along_x():
    odom = SaganOdometry()
    odom.state_callback(_states([10.0] * 4, [0.0] * 4))
    est = odom.step()
    assert est.x == pytest.approx(0.006)
    assert est.y == pytest.approx(0.0, abs=1e-12)
    assert est.theta == pytest.approx(0.0, abs=1e-12)


def test_twist_matches_pose_change():
    odom = SaganOdometry()
    odom.state_callback(_states([3.0, 5.0, 3.0, 5.0], [0.2, 0.1, -0.1, 0.3]))
    first = odom.step()
    second = odom.step()
    assert second.linear_x == pytest.approx((second.x - first.x) / TIME_STEP)
    assert second.linear_y == pytest.approx((second.y - first.y) / TIME_STEP)
    assert second.angular_z == pytest.approx((second.theta - first.theta) / TIME_STEP)


def test_straight_drive_accumulates_linearly():
    single = SaganOdometry()
    single.state_callback(_states([7.0] * 4, [0.0] * 4))
    one = single.step()

    repeated = SaganOdometry()
    repeated.state_callback(_states([7.0] * 4, [0.0] * 4))
    for _ in range(5):
        est = repeated.step()
    assert est.x == pytest.approx(5 * one.x)


def test_sideways_drive_moves_along_y():
    odom = SaganOdometry()
    odom.state_callback(_states([10.0] * 4, [math.pi / 2] * 4))
    est = odom.step()
    assert est.x == pytest.approx(0.0, abs=1e-12)
    assert est.y > 0.0


def test_mirrored_wheel_speeds_turn_in_opposite_directions():
    left = SaganOdometry()
    left.state_callback(_states([-5.0, 5.0, -5.0, 5.0], [0.0] * 4))
    right = SaganOdometry()
    right.state_callback(_states([5.0, -5.0, 5.0, -5.0], [0.0] * 4))
    a = left.step()
    b = right.step()
    assert a.theta != 0.0
    assert a.theta == pytest.approx(-b.theta)
    assert _yaw(a.orientation) == pytest.approx(a.theta)


def test_main_writes_one_estimate_per_state(monkeypatch, capsys):
    state = _states([10.0] * 4, [0.0] * 4).to_dict()
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(state) + "\n\n" + json.dumps(state) + "\n"))
    assert main([]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert second["x"] == pytest.approx(2 * first["x"])
    assert first["orientation"]["w"] == pytest.approx(1.0)


def test_main_rejects_bad_input(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("not json\n"))
    assert main([]) == 1
    assert "line 1" in capsys.readouterr().err