[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rappids"
version = "0.1.0"
description = "Depth-image collision checking by rectangular pyramid partitioning, with quadcopter control and estimation components"
requires-python = ">=3.10"
keywords = ["quadcopter", "collision checking", "depth image", "kalman filter", "control", "mixer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["rappids"]

[tool.pytest.ini_options]
addopts = "-ra"
