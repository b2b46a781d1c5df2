[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "discogen"
version = "0.1.0"
description = "Tooling for mapping API discovery indices, naming generated crates, parsing URI templates and rendering templates from structured data"
requires-python = ">=3.10"
keywords = ["discovery", "code-generation", "templates", "uri-template", "jinja2"]
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
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "pyyaml>=6.0",
    "jinja2>=3.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
mcp = "discogen.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["discogen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
