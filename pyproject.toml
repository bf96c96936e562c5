[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pocpen"
version = "0.4.0"
description = "Idle creature pen engine: animation metadata and timing, wandering physics, XP and roster configuration."
requires-python = ">=3.11"
dependencies = [
    "tomli-w",
]
keywords = ["terminal", "game", "pet", "idle", "sprites", "animation"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pocpen"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
