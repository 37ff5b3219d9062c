[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "raxkit"
version = "1.0.2"
description = "Load balancing, bootstrap convergence checks, binary serialization and logging utilities for maximum-likelihood phylogenetics"
requires-python = ">=3.10"
dependencies = []
keywords = ["phylogenetics", "bootstrap", "load balancing", "bootstopping", "MRE consensus"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["raxkit"]

[tool.pytest.ini_options]
addopts = "-ra"
