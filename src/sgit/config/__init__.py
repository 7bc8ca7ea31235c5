"""Settings loading, persistence and interactive setup."""
