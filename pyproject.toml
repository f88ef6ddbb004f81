[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "diagkit"
version = "0.1.0"
description = "Declarative diagnostics for Python errors: codes, severities, help text, labelled spans and cause chains."
requires-python = ">=3.10"
dependencies = []
keywords = ["diagnostics", "errors", "exceptions", "error-reporting", "labels", "spans"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["diagkit"]

[tool.hatch.build.targets.sdist]
include = ["diagkit", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 99
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
