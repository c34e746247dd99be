[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wfrunner"
version = "0.1.0"
description = "Helpers for running CI workflow jobs locally: expression rewriting, container binds and names, run-context values and job log formatting"
requires-python = ">=3.10"
dependencies = []
keywords = ["ci", "workflow", "runner", "expressions", "containers", "logging"]
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
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["wfrunner"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
