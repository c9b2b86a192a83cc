"""Async adapters for the image providers the enhancer can call."""
