[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gee"
version = "0.1.0"
description = "Small building blocks: a WSGI web framework, an in-process cache, a tiny SQLite ORM, RPC framing and discovery, and a few classic algorithms"
requires-python = ">=3.10"
dependencies = [
    "jinja2",
]
keywords = [
    "web",
    "framework",
    "wsgi",
    "cache",
    "lru",
    "consistent-hashing",
    "orm",
    "sqlite",
    "rpc",
    "service-discovery",
]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Database :: Front-Ends",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["gee"]

[tool.hatch.build.targets.sdist]
include = ["gee", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
