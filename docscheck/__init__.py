"""Structural checks for Terraform Provider documentation."""

__version__ = "0.1.0"
