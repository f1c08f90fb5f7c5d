[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nesppu"
version = "0.1.0"
description = "A cycle-stepped NES picture processing unit: nametables, palettes, pattern tables, OAM and rendering."
requires-python = ">=3.10"
dependencies = []
keywords = ["nes", "ppu", "emulator", "graphics", "famicom"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nesppu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
