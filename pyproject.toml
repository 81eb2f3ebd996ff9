[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gosling"
version = "3.2.0"
description = "Create, name and renumber SQL and Python database migration files"
requires-python = ">=3.10"
dependencies = []
keywords = ["database", "migrations", "schema", "sql", "sqlite", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gosling = "gosling.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gosling"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
