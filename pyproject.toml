[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fieldlog"
version = "0.1.0"
description = "Structured, levelled logging with fields, hooks and text or JSON formatters"
requires-python = ">=3.10"
dependencies = []
keywords = ["logging", "structured-logging", "json", "hooks", "fields"]
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
    "Topic :: System :: Logging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fieldlog"]

[tool.pytest.ini_options]
addopts = "-ra"
