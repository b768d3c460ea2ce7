[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trirast"
version = "0.1.0"
description = "A small software triangle rasterizer driven by a line-oriented scene description, writing PNG images."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["rasterizer", "graphics", "triangles", "png", "dda", "clipping"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
trirast = "trirast.scene:main"

[tool.hatch.build.targets.wheel]
packages = ["trirast"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
