"""Record sync background worker."""
