[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bplustree-arena"
version = "0.1.0"
description = "An in-memory B+ tree map with linked leaves, sibling redistribution and range queries"
requires-python = ">=3.10"
dependencies = []
keywords = ["btree", "b+tree", "bplustree", "data-structures", "ordered-map", "index"]
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
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bplustree_arena"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
