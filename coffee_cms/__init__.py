"""Headless content backend for a coffee blog, recipe, and review site."""

__version__ = "1.0.0"
