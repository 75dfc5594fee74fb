[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dasnode"
version = "0.1.0"
description = "Namespaced Merkle tree IPLD nodes, share retrieval helpers, file locks and a simple keystore for data availability sampling nodes"
requires-python = ">=3.10"
dependencies = []
keywords = ["data-availability", "namespaced-merkle-tree", "ipld", "cid", "keystore", "lockfile"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dasnode"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
