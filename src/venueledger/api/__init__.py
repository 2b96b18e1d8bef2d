"""HTTP API for venueledger."""

from venueledger.api.app import create_app

__all__ = ["create_app"]
