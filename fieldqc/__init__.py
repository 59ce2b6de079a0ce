"""fieldqc - field classification and quality review for task recordings."""

__version__ = "0.1.0"
