#!/usr/bin/env python3
"""
IntentPoker - Server Startup Script

Usage:
    python run.py [--host HOST] [--port PORT] [--reload] [--advisor llm|random]

The LLM advisor reads AI_API_KEY and AI_API_BASE_URL from the environment;
without a key the bots play the fallback policy.
"""

import argparse
import os
import uvicorn


def main():
    parser = argparse.ArgumentParser(description="IntentPoker Server")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    parser.add_argument(
        "--advisor", choices=["llm", "random"],
        help="Bot strategy source (overrides AI_ADVISOR)",
    )
    parser.add_argument("--log-level", default="info", help="Uvicorn log level")
    args = parser.parse_args()

    if args.advisor:
        os.environ["AI_ADVISOR"] = args.advisor

    uvicorn.run(
        "intentpoker.server.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
