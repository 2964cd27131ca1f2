[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mipcsim"
version = "0.1.0"
description = "Building blocks for a cycle-level pipelined MIPS processor simulator: instruction fields, memory, latches, decode, execute and memory-stage operations"
requires-python = ">=3.10"
dependencies = []
keywords = ["mips", "simulator", "pipeline", "emulator", "computer-architecture"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mipcsim"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
