[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dexfm"
version = "0.1.0"
description = "Six-operator FM synthesis operator engines, envelope geometry, algorithm diagrams and editor theming"
requires-python = ">=3.10"
dependencies = []
keywords = ["fm", "synthesis", "synthesizer", "dx7", "opl", "audio", "envelope"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dexfm"]

[tool.pytest.ini_options]
addopts = "-ra"
