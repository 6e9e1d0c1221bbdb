"""Record sync HTTP API."""
