[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "taurusgen"
version = "0.1.0"
description = "Scaffold Go microservice projects from a template directory, with component selection and wire provider-set generation"
requires-python = ">=3.10"
keywords = ["scaffolding", "code-generation", "go", "wire", "microservice", "cli"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
taurus = "taurusgen.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["taurusgen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
