"""Git process access and working tree helpers."""
