"""Record synchronization engine."""
