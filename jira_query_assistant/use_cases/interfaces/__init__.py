"""Interfaces for use cases."""
