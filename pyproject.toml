[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "quicksplash"
version = "0.1.0"
description = "A terminal party game: answer prompts over the network, vote on the best reply, win rounds."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "party-game", "terminal", "multiplayer", "tcp"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
quicksplash-server = "quicksplash.server:main"
quicksplash-client = "quicksplash.client:main"

[tool.hatch.build.targets.wheel]
packages = ["quicksplash"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
