[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nimbleserver"
version = "0.23.0"
description = "Authoritative step composition and party management for deterministic lockstep game servers"
requires-python = ">=3.10"
dependencies = []
keywords = ["lockstep", "netcode", "game-server", "deterministic", "multiplayer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nimbleserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
