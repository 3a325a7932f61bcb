[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "netwatch"
version = "0.1.0"
description = "Terminal monitor for network sockets and interface traffic on Linux"
requires-python = ">=3.10"
dependencies = []
keywords = ["network", "monitor", "curses", "traffic", "sockets", "proc", "sysfs"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console :: Curses",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
netwatch = "netwatch.app:main"

[tool.hatch.build.targets.wheel]
packages = ["netwatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
