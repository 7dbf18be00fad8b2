"""Utility helpers; import from the specific modules."""
