"""Per-user persisted state."""
