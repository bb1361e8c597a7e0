"""Linux hardware information read from sysfs and procfs."""

__version__ = "0.1.2"