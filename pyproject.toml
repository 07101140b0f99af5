[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "comicsearch"
version = "0.1.0"
description = "Keyword search over XKCD comics: word normalisation, indexing, update services, limiters and HTTP handlers"
requires-python = ">=3.10"
keywords = ["xkcd", "search", "index", "stemming", "rate-limiting", "werkzeug"]
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
    "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
    "Topic :: Text Processing :: Linguistic",
]
dependencies = [
    "pyyaml>=6.0",
    "requests>=2.28",
    "werkzeug>=2.3",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
    "responses>=0.23",
]

[tool.hatch.build.targets.wheel]
packages = ["comicsearch"]

[tool.hatch.build.targets.sdist]
include = ["comicsearch", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
