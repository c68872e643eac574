"""Core infrastructure for dutrim: paths, configuration and theming."""
