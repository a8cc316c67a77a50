#!/usr/bin/env python3
"""
motorlog FastAPI server

Entry point that loads the config and runs the API under uvicorn.
"""

import argparse
import os

import uvicorn

from .core.config import load_config_from
from .core.server import create_app


def main():
    """Main entry point for motorlog server."""
    parser = argparse.ArgumentParser(description="motorlog server")
    parser.add_argument("-c", "--config", help="Path to YAML config",
                        default=os.environ.get("MOTORLOG_CONFIG", "config.yaml"))
    args = parser.parse_args()

    config = load_config_from(args.config)
    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        reload=False,
        access_log=False,
        log_level=config.log_level.lower(),
    )


if __name__ == "__main__":
    main()
