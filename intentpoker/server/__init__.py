"""
IntentPoker Server - FastAPI Server Layer
"""

from intentpoker.server.app import app, create_app

__all__ = ["app", "create_app"]
