[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "alfalfa"
version = "0.1.0"
description = "OCB-AES block primitives and key schedule, base64 session key encoding, and trace-driven link delay queues"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "ocb",
    "aes",
    "gf128",
    "base64",
    "network-emulation",
    "delay-queue",
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
    "Topic :: Security :: Cryptography",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["alfalfa"]

[tool.hatch.build.targets.sdist]
include = [
    "alfalfa",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
addopts = "-ra"
