[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "usptool"
version = "0.1.0"
description = "Helpers for USPTO patent application data: document selection, continuity families, bulk data products and agent-friendly output."
requires-python = ">=3.10"
dependencies = []
keywords = ["uspto", "patent", "file-wrapper", "continuity", "bulk-data"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Legal Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["usptool"]

[tool.hatch.build.targets.sdist]
include = ["usptool", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
