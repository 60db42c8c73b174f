[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cub3d"
version = "0.1.0"
description = "A small tile-map game with a minimal windowing layer, an XPM reader and a .cub map parser"
requires-python = ">=3.10"
keywords = ["game", "tile map", "xpm", "pixmap", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cub3d = "cub3d.main:main"

[tool.hatch.build.targets.wheel]
packages = ["cub3d"]

[tool.pytest.ini_options]
addopts = "-ra"
