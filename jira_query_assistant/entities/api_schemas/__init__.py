"""API schema models."""
