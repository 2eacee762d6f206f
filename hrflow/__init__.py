"""HR automation dashboard core: webhook automation, job and candidate workflows."""

__version__ = "0.3.0"
