"""
API route handlers for different endpoint groups.

Each router handles a specific domain of functionality (studio page, enhance
API, health) keeping the code organized and maintainable.
"""
