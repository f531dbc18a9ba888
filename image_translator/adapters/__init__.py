"""Adapters - concrete collaborators for the application ports."""
