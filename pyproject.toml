[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "thuvien"
version = "0.1.0"
description = "Console manager for library reader cards: add, delete and list readers"
requires-python = ">=3.10"
dependencies = []
keywords = ["library", "readers", "console", "binary-search-tree", "card"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Vietnamese",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
thuvien = "thuvien.screens:main"
thuvien-cards = "thuvien.cardpool:main"

[tool.hatch.build.targets.wheel]
packages = ["thuvien"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
