"""Validate GitHub issue references as justifications for privileged actions."""

__version__ = "0.1.0"
