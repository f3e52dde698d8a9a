"""OSINT tool comparison service.

Normalizes heterogeneous OSINT tool responses into one canonical shape,
scores them with weighted quality metrics and diffs them side by side.
"""

__version__ = "0.1.0"
