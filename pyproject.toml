[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "paybot"
version = "0.1.0"
description = "Telegram bot for recording personal payments and building category reports"
requires-python = ">=3.10"
keywords = ["telegram", "bot", "payments", "expenses", "reports", "sqlite", "webhook"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Web Environment",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Office/Business :: Financial",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
paybot = "paybot.app:main"

[tool.hatch.build.targets.wheel]
packages = ["paybot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
