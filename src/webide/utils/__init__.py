"""Utility helpers shared across the webide package."""
