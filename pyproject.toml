[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sagan-rover"
version = "0.1.0"
description = "Drive control, command generation and wheel odometry for a four-wheel-steered rover"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "robotics",
    "rover",
    "odometry",
    "four-wheel steering",
    "controller",
    "kinematics",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sagan-commander = "sagan_rover.commander:main"
sagan-odometry = "sagan_rover.odometry:main"

[tool.hatch.build.targets.wheel]
packages = ["sagan_rover"]

[tool.hatch.build.targets.sdist]
include = ["sagan_rover", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
