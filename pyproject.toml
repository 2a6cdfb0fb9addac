[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "codetree"
version = "1.3.0"
description = "Regex-based analysers that extract dependencies, interfaces and component types from Python, Rust, PHP and Swift source text"
requires-python = ">=3.10"
dependencies = []
keywords = ["code analysis", "dependencies", "interfaces", "php", "swift", "rust", "python"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Documentation",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["codetree"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
