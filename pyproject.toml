[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "icsmotion"
version = "0.1.0"
description = "ICS serial servo control and motion sequencing for a sixteen-servo humanoid robot"
requires-python = ">=3.10"
dependencies = [
    "pyserial",
]
keywords = ["robot", "servo", "ics", "serial", "motion", "humanoid"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
icsmotion = "icsmotion.app:main"

[tool.hatch.build.targets.wheel]
packages = ["icsmotion"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
