"""HTTP API for maintcrm."""
from maintcrm.api.app import create_app

__all__ = ["create_app"]
