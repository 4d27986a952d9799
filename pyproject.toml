[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "navforge"
version = "0.0.2"
description = "Navigation mesh building blocks: triangle rasterization, span filtering and polygon mesh construction"
requires-python = ">=3.11"
dependencies = []
keywords = ["navmesh", "navigation", "pathfinding", "heightfield", "triangulation", "ai"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["navforge"]

[tool.pytest.ini_options]
addopts = "-ra"
