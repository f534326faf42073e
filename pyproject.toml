[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "sysplay"
version = "0.1.0"
description = "Small operating-systems exercises: a pseudo shell, process launchers and schedulers, and a threaded bank ledger"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "shell",
    "processes",
    "signals",
    "scheduling",
    "round-robin",
    "threads",
    "synchronisation",
    "operating-systems",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sysplay-shell = "sysplay.shell:main"
sysplay-cpubound = "sysplay.workloads:cpubound_main"
sysplay-iobound = "sysplay.workloads:iobound_main"
sysplay-launch = "sysplay.launcher:main_launch"
sysplay-signalled = "sysplay.launcher:main_signalled"
sysplay-roundrobin = "sysplay.roundrobin:main_plain"
sysplay-roundrobin-report = "sysplay.roundrobin:main_report"
sysplay-weighted = "sysplay.weighted:main"
sysplay-ledger = "sysplay.ledger:main"
sysplay-bank-partitioned = "sysplay.threaded_bank:main_partitioned"
sysplay-bank-periodic = "sysplay.threaded_bank:main_periodic"
sysplay-bank-savings = "sysplay.savings:main"

[tool.setuptools.packages.find]
include = ["sysplay*"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
