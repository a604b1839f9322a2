"""Interactive timer form (Textual)."""
