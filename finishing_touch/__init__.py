"""Finishing Touch operations API."""
