[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "envmonitor"
version = "0.1.0"
description = "Environmental monitoring station that scores sensor readings with a small trained neural network and reports over MQTT"
requires-python = ">=3.10"
keywords = ["mlp", "neural-network", "mqtt", "sensors", "environment", "monitoring"]
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
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: System :: Monitoring",
]
dependencies = [
    "paho-mqtt",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
envmonitor = "envmonitor.station:main"

[tool.hatch.build.targets.wheel]
packages = ["envmonitor"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
