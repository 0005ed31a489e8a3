"""Utility helpers for rnbox."""
