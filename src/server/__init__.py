"""Read-only HTTP reader for a coursebook checkout."""
