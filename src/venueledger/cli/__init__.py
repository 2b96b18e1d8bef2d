"""Command-line interface for venueledger."""
