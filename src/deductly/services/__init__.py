"""Deductly calculation services."""
