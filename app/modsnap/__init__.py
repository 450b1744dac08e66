"""modsnap - Drift detection for mod deployment directories.

Compares the files physically present in a game's deployment directories
against the files the deployment manager put there, across deployment
cycles.
"""

__version__ = "0.1.0"
