"""
Health check endpoints for monitoring and diagnostics.

Providers are only reachable with a user's API key, so health reports
what is configured rather than probing the upstream services.
"""

import time
from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from ..models.common import HealthStatus
from ..dependencies.enhancer import get_enhancer_manager
from merch_studio import __version__
from merch_studio.models.manager import EnhancerManager

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()

@router.get("/", response_model=HealthStatus)
async def health_check(manager: EnhancerManager = Depends(get_enhancer_manager)):
    """
    Basic health check endpoint.

    Returns the status of the API and the providers it can route to.
    """
    uptime = time.time() - _server_start_time

    dependencies = {
        name: f"✅ Configured ({cfg.type.value})"
        for name, cfg in manager.providers.items()
    }

    try:
        manager.prompts.load_prompt(manager.prompt_ref)
        dependencies["prompts"] = f"✅ {manager.prompt_ref}"
    except (FileNotFoundError, ValueError) as e:
        dependencies["prompts"] = f"❌ Error: {str(e)}"

    return HealthStatus(
        status="healthy",
        version=__version__,
        uptime=uptime,
        dependencies=dependencies,
        default_provider=manager.default_provider,
    )

@router.get("/detailed")
async def detailed_health_check(manager: EnhancerManager = Depends(get_enhancer_manager)):
    """
    Detailed health check with per-provider call statistics.
    """
    uptime = time.time() - _server_start_time
    stats = manager.get_stats()

    providers = {}
    for name in manager.provider_names():
        provider_stats = stats.get(name, {})
        successes = provider_stats.get("successful_calls", 0)
        providers[name] = {
            "total_calls": provider_stats.get("total_calls", 0),
            "successful_calls": successes,
            "average_latency_ms": (provider_stats["total_latency_ms"] / successes) if successes else None,
        }

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime_seconds": uptime,
        "uptime_human": f"{uptime//3600:.0f}h {(uptime%3600)//60:.0f}m {uptime%60:.0f}s",
        "default_provider": manager.default_provider,
        "providers": providers,
    }

@router.get("/ready")
async def readiness_check(manager: EnhancerManager = Depends(get_enhancer_manager)):
    """
    Readiness probe for container deployments.

    Ready once the configuration is loaded and the prompt templates resolve.
    """
    try:
        manager.prompts.load_prompt(manager.prompt_ref)
    except (FileNotFoundError, ValueError) as e:
        return {"ready": False, "reason": f"Prompt templates unavailable: {e}"}

    return {"ready": True, "message": "Service ready to handle requests"}
