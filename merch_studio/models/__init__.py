"""Enhancer client, provider adapters, prompts and the product catalogue."""
