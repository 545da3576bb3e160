[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dfbsa"
version = "0.1.0"
description = "Read and extract Daggerfall BSA archives and the 3D objects stored in them"
requires-python = ">=3.10"
dependencies = []
keywords = ["daggerfall", "bsa", "archive", "3d", "game-data", "file-format"]
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
    "Topic :: File Formats",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
dfbsa = "dfbsa.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["dfbsa"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"
