#!/usr/bin/env python3
# backend/run.py
"""
Development server runner.

Serves app.main:app with uvicorn on settings.port (PORT, default 3000).
"""
import os
from pathlib import Path
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

import uvicorn

from app.core.config import settings

if __name__ == "__main__":
    print(f"API listening on http://localhost:{settings.port}")
    print(f"API Docs: http://localhost:{settings.port}/docs")

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment != "production",
        log_level=settings.log_level.lower(),
    )
