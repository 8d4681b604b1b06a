[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pcmflow"
version = "0.1.0"
description = "Composable PCM audio sources: buffers, sample and channel conversion, resampling, mixing, queues and WAV decoding"
requires-python = ">=3.10"
dependencies = []
keywords = ["audio", "pcm", "resampling", "mixer", "wav", "samples", "queue"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Conversion",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["pcmflow"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
