"""
Access to the process-wide EnhancerManager.
"""

from merch_studio.models.manager import EnhancerManager

def get_enhancer_manager() -> EnhancerManager:
    """FastAPI dependency to get the enhancer manager from app state."""
    from ..main import app_state
    return app_state["enhancer_manager"]
