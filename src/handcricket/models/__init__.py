"""Pydantic domain models and typed errors."""
