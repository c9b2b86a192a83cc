"""
Pydantic models for API request/response schemas.

These models define the shape of data that flows between the studio page and
the backend, separate from the enhancer's internal types.
"""
