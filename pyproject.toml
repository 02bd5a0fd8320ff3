[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tugwar"
version = "0.1.0"
description = "A tug-of-war match simulation with fatigue, falls, team alignment and a live pygame view"
requires-python = ">=3.10"
keywords = ["simulation", "game", "tug-of-war", "pygame"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Simulation",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tugwar = "tugwar.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tugwar"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
