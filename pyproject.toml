[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mgedit"
version = "0.1.0"
description = "Buffer, motion, directory-editor and C-mode machinery of a small Emacs-style text editor"
requires-python = ">=3.10"
keywords = ["editor", "emacs", "mg", "dired", "c-mode", "terminal"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mgedit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
