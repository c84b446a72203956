"""Centrality analysis of the Iliad character-interaction network."""

__version__ = "0.1.0"
