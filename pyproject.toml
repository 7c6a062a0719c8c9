[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "siggrep"
version = "0.1.4"
description = "Interactive grep for streaming text"
requires-python = ">=3.10"
dependencies = []
keywords = ["grep", "interactive", "stream", "logs", "filter", "terminal"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Processing :: Filters",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest", "pytest-asyncio"]

[project.scripts]
sig = "siggrep.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["siggrep"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
