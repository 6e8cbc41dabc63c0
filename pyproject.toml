[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "compilertoolkit"
version = "0.1.0"
description = "Compiler course tools: an expression and matrix calculator, linear-scan register allocation and graph-colouring register allocation"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "compiler",
    "register allocation",
    "linear scan",
    "graph coloring",
    "expression tree",
    "calculator",
    "lu decomposition",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["compilertoolkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
