#!/usr/bin/env python3
"""
Development server launcher for Merch Studio.

This script starts the FastAPI server with appropriate settings for development.
For production, you'd use a proper ASGI server deployment.
"""

import logging
import os
import uvicorn
from pathlib import Path

project_root = Path(__file__).parent
package_path = project_root / "merch_studio"

if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    print("Starting Merch Studio Development Server")
    print(f"Project root: {project_root}")
    print(f"Studio will be available at: http://localhost:{port}")
    print(f"API documentation at: http://localhost:{port}/docs")
    print("\n" + "="*50 + "\n")

    # Start the server
    uvicorn.run(
        "merch_studio.api.main:create_app",
        factory=True,
        host="0.0.0.0",  # Accept connections from any IP
        port=port,
        reload=True,     # Auto-reload on code changes (development only)
        reload_dirs=[str(package_path)],  # Only watch the package
        log_level="info"
    )
