[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "worktracker"
version = "0.1.0"
description = "Track work sessions, describe them and organise them with tags, through a JSON API backed by SQLite and a small web front end."
requires-python = ">=3.10"
keywords = ["time tracking", "work sessions", "tags", "productivity", "rest api", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Framework :: AsyncIO",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]
dependencies = [
    "starlette>=0.27",
    "uvicorn>=0.23",
    "httpx>=0.24",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.21",
    "httpx>=0.24",
]

[project.scripts]
worktracker-server = "worktracker.app:main"
worktracker-web = "worktracker.frontend:main"

[tool.hatch.build.targets.wheel]
packages = ["worktracker"]

[tool.hatch.build.targets.sdist]
include = ["worktracker", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
