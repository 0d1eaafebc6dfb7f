[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rspasm"
version = "0.1.0"
description = "Machine-code assembler for the N64 Reality Signal Processor, with a model of its shared memory"
requires-python = ">=3.10"
dependencies = []
keywords = ["n64", "rsp", "mips", "assembler", "emulation", "testing"]
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
    "Topic :: Software Development :: Assemblers",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rspasm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
