"""Bundled data files for modsnap."""
