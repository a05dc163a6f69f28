[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meteoudp"
version = "0.1.0"
description = "A small UDP weather service: a server that answers weather queries for Italian cities and a client that asks it"
requires-python = ">=3.10"
dependencies = []
keywords = ["udp", "weather", "client", "server", "networking", "datagram"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
meteoudp-server = "meteoudp.server:main"
meteoudp-client = "meteoudp.client:main"

[tool.hatch.build.targets.wheel]
packages = ["meteoudp"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
