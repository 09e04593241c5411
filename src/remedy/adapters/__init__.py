"""Persistence adapters for remedy."""
