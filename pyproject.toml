[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "i2cem"
version = "0.1.0"
description = "Bit-level emulation of I2C and SPI buses, masters and register-backed slave devices"
requires-python = ">=3.10"
dependencies = []
keywords = ["i2c", "spi", "emulator", "bus", "register", "embedded"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Emulators",
    "Topic :: Software Development :: Embedded Systems",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
i2cem-demo = "i2cem.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["i2cem"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
