[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "perspecto"
version = "0.1.0"
description = "Homogeneous points, rigid poses, camera intrinsics, planar sampled images and Gauss-Newton pose estimation"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "computer vision",
    "camera model",
    "pose estimation",
    "homogeneous coordinates",
    "image sampling",
    "gauss-newton",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["perspecto"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
