"""Periodic publisher of constant drive commands for the rover."""

from __future__ import annotations

import argparse
import json
import sys
import time
from typing import Callable, Optional, Sequence

from .messages import WHEEL_COUNT, SaganCmd

COMMAND_TOPIC = "/SaganCommands"
PUBLISH_PERIOD = 0.01
DEFAULT_WHEEL_VELOCITY = 10.0
DEFAULT_STEERING_ANGLE_DEG = 0.0


def default_command() -> SaganCmd:
    """Return the command sent every cycle: all wheels forward, steering straight."""
    message = SaganCmd()
    for steering in message.steering_cmd:
        steering.angular_position = DEFAULT_STEERING_ANGLE_DEG * 3.14 / 180
    for wheel in message.wheel_cmd[:WHEEL_COUNT]:
        wheel.angular_velocity = DEFAULT_WHEEL_VELOCITY
    return message


class CommandPublisher:
    """Builds the drive command and hands it to a publish callback."""

    def __init__(self, publish: Callable[[SaganCmd], None]) -> None:
        self._publish = publish

    def publish_message(self) -> SaganCmd:
        """Build a fresh command, publish it and return it."""
        message = default_command()
        self._publish(message)
        return message


def _write_line(message: SaganCmd) -> None:
    sys.stdout.write(json.dumps(message.to_dict()) + "\n")
    sys.stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Write drive commands as JSON lines to standard output at a fixed rate."""
    parser = argparse.ArgumentParser(
        prog="sagan-commander",
        description=f"Publish drive commands for {COMMAND_TOPIC} as JSON lines.",
    )
    parser.add_argument(
        "--period",
        type=float,
        default=PUBLISH_PERIOD,
        help="seconds between messages (default: %(default)s)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=None,
        help="number of messages to publish; runs until interrupted if omitted",
    )
    args = parser.parse_args(argv)
    if args.period < 0:
        parser.error("--period must not be negative")
    if args.count is not None and args.count < 0:
        parser.error("--count must not be negative")

    publisher = CommandPublisher(_write_line)
    sent = 0
    try:
        while args.count is None or sent < args.count:
            publisher.publish_message()
            sent += 1
            if args.count is None or sent < args.count:
                time.sleep(args.period)
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())