[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wipdungeon"
version = "0.1.0"
description = "Game logic for a small grid-based dungeon crawler: dungeon files, input motions, timed events, menus and game rules."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "dungeon", "roguelike", "crawler", "grid"]
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
    "Topic :: Games/Entertainment :: Role-Playing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wipdungeon"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
