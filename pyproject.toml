[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tankgame"
version = "0.1.0"
description = "A small arcade adventure: login, cutscenes, two maze levels, a lock-drilling minigame and a wave-based tank battle"
requires-python = ">=3.10"
keywords = ["game", "arcade", "tank", "maze", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Arcade",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tankgame = "tankgame.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tankgame"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
