"""Per-app screen time statistics."""
