"""
FastAPI application layer for Merch Studio.

Serves the design studio page and the enhance endpoint that forwards an
uploaded design, with the user's own API key, to an AI image provider.
"""
