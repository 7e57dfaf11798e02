[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kissmpris"
version = "0.1.0"
description = "Query MPRIS media players on the D-Bus session bus for playback status and track metadata"
requires-python = ">=3.10"
dependencies = []
keywords = ["mpris", "dbus", "media-player", "now-playing", "metadata"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Players",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kissmpris-demo = "kissmpris.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["kissmpris"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
