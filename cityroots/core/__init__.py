"""Core infrastructure: configuration, constants, errors, logging."""
