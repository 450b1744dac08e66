"""Core infrastructure for modsnap: paths, configuration and theming."""
