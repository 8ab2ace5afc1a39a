[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gofer"
version = "0.1.0"
description = "Client library for a gofer chat server: REST API client, popups and a mouse-aware home screen model"
requires-python = ">=3.10"
dependencies = [
    "requests",
    "wcwidth",
]
keywords = ["chat", "terminal", "tui", "client", "channels", "direct-messages"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["gofer"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
