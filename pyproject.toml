[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hazwatch"
version = "0.1.0"
description = "Watch natural hazards near home: earthquakes, wildfires and EONET events, with phone alerts"
requires-python = ">=3.11"
dependencies = [
    "requests",
]
keywords = ["earthquake", "wildfire", "eonet", "firms", "hazard", "alerts", "monitoring"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Atmospheric Science",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[project.scripts]
wobblealert = "hazwatch.wobble:main"

[tool.hatch.build.targets.wheel]
packages = ["hazwatch"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]
