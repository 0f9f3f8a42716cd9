"""Lawyer credential verification against a registry of approved records."""

__version__ = "0.1.0"
