import json

import pytest

from sagan_rover.commander import CommandPublisher, default_command, main
from sagan_rover.messages import SaganCmd


def test_default_command_wheels_forward():
    cmd = default_command()
    assert [w.angular_velocity for w in cmd.wheel_cmd] == [10.0] * 4


def test_default_command_steering_straight():
    cmd = default_command()
    assert [s.angular_position for s in cmd.steering_cmd] == [0.0] * 4


def test_publish_message_hands_command_to_callback():
    received = []
    publisher = CommandPublisher(received.append)
    returned = publisher.publish_message()
    assert received == [returned]
    assert received[0] == default_command()


def test_publish_message_builds_fresh_messages():
    received = []
    publisher = CommandPublisher(received.append)
    publisher.publish_message()
    publisher.publish_message()
    assert len(received) == 2
    assert received[0] is not received[1]
    received[0].wheel_cmd[0].angular_velocity = -1.0
    assert received[1].wheel_cmd[0].angular_velocity == 10.0


def test_main_writes_requested_number_of_lines(capsys):
    assert main(["--count", "3", "--period", "0"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 3
    for line in lines:
        assert SaganCmd.from_dict(json.loads(line)) == default_command()


def test_main_zero_count_writes_nothing(capsys):
    assert main(["--count", "0"]) == 0
    assert capsys.readouterr().out == ""


def test_main_rejects_negative_period():
    with pytest.raises(SystemExit) as info:
        main(["--period", "-1", "--count", "1"])
    assert info.value.code == 2