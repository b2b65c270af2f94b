#!/usr/bin/env python3
"""
Simple script to run the Team Roster API server.
"""

import uvicorn

from roster_management.config import configure_logging, load_env, runtime_config

if __name__ == "__main__":
    load_env()
    config = runtime_config()
    configure_logging(config.log_level)

    print("Starting Team Roster API...")
    print(f"Data directory: {config.data_dir}")
    print(f"API will be available at: http://localhost:{config.api_port}")
    print(f"Interactive docs at: http://localhost:{config.api_port}/docs")

    uvicorn.run(
        "roster_management.api.main:app",
        host=config.api_host,
        port=config.api_port,
        reload=True,  # Auto-reload on code changes
        log_level=config.log_level.lower()
    )
