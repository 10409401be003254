"""Shared helpers used across packagedetails modules."""
