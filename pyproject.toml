[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "blakediff"
version = "0.1.0"
description = "Find duplicate and missing files using BLAKE3 hash reports"
requires-python = ">=3.10"
dependencies = []
keywords = ["blake3", "hash", "duplicates", "files", "compare", "report"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
blakediff = "blakediff.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["blakediff"]

[tool.pytest.ini_options]
addopts = "-ra"
