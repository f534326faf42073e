"""Operating-systems exercises: a pseudo shell, workloads, process launchers and schedulers, and a threaded bank ledger."""

__version__ = "0.1.0"