"""Boundary-facing helpers used by the routes."""
