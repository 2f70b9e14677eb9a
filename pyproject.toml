[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slslog"
version = "0.1.0"
description = "Building blocks for a hosted log service client: logtail configs, logstore operations, endpoint parsing and LZ4 block compression."
requires-python = ">=3.10"
dependencies = [
    "lz4",
]
keywords = ["logging", "log service", "logstore", "logtail", "lz4"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
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
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["slslog"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
