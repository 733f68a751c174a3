"""Signed player grants and request authorization."""
