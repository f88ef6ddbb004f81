"""Declarative diagnostics for errors: codes, severities, help, labels and cause chains."""

__version__ = "0.1.0"