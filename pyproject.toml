[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dogstory"
version = "0.1.0"
description = "Server-side building blocks for a dog-walking map game: JSON map configuration, map API documents, command-line options, a periodic asyncio ticker and a small asyncio HTTP/1.1 server."
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "server", "maps", "json", "http", "asyncio", "ticker"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Framework :: AsyncIO",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["dogstory"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
