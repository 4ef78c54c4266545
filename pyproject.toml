[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bonsaitts"
version = "0.1.0"
description = "Parameter generation core for HMM-based speech synthesis: state durations, label timing, synthesis settings and MLPG smoothing"
requires-python = ">=3.10"
dependencies = []
keywords = ["speech", "synthesis", "tts", "hts", "mlpg", "hmm"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Speech",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bonsaitts"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
