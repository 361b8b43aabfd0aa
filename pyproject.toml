[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "denvm"
version = "1.0.0"
description = "Disassembler for NVM bytecode files"
requires-python = ">=3.10"
keywords = ["nvm", "bytecode", "disassembler", "hexdump", "xref"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Disassemblers",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
denvm = "denvm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["denvm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
