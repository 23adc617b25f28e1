[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gomoku-net"
version = "0.1.0"
description = "A small networked Gomoku (five in a row) server and console client"
requires-python = ">=3.10"
dependencies = []
keywords = ["gomoku", "five-in-a-row", "board-game", "asyncio", "tcp", "game-server"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
gomoku-server = "gomoku_net.server:main"
gomoku-client = "gomoku_net.client:main"

[tool.hatch.build.targets.wheel]
packages = ["gomoku_net"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
