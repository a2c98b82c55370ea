"""Drive control, command generation and wheel odometry for a four-wheel-steered rover."""

__version__ = "0.1.0"
__all__ = ["commander", "controller", "messages", "odometry"]