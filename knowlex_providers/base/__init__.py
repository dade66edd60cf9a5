"""Shared, provider-agnostic building blocks."""
