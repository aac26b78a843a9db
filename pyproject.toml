[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toycc"
version = "0.1.0"
description = "Syntax trees, parsers and three-address, stack and target code emitters for a small C-like teaching language"
requires-python = ">=3.10"
dependencies = []
keywords = ["compiler", "ast", "parser", "three-address-code", "stack-machine", "graphviz"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["toycc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
