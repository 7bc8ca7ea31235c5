"""Command routing: flag declarations, parsing and the AI/passthrough flows."""
