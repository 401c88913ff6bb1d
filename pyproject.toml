[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rtypenet"
version = "0.1.0"
description = "Binary game packet protocol, UDP/TCP transports and simple physics and animation systems for a multiplayer shooter"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "networking", "udp", "tcp", "packets", "physics", "animation", "multiplayer"]
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
    "Topic :: Games/Entertainment",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rtypenet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
