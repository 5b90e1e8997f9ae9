[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "v6fs"
version = "0.1.0"
description = "Read Unix Version 6 filesystem disk images and checksum their inodes and pathnames"
requires-python = ">=3.10"
dependencies = []
keywords = ["unix", "v6", "filesystem", "disk image", "inode", "checksum"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
v6fs = "v6fs.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["v6fs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
