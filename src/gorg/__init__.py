"""Interactive fuzzy finder for local Git working copies."""
