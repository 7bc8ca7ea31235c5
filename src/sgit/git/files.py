"""Working tree file inspection."""

from pathlib import Path

LARGE_FILE_BYTES = 1024 * 1024
BINARY_SNIFF_BYTES = 512

BINARY_EXTENSIONS = frozenset(
    {
        ".exe", ".bin", ".dll", ".so", ".dylib", ".a", ".o", ".obj",
        ".jpg", ".jpeg", ".png", ".gif", ".bmp", ".ico", ".tiff", ".webp",
        ".mp3", ".mp4", ".avi", ".mov", ".wav", ".flac",
        ".zip", ".tar", ".gz", ".bz2", ".xz", ".7z", ".rar",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".class", ".jar", ".pyc", ".pyo", ".whl",
        ".woff", ".woff2", ".ttf", ".otf", ".eot",
        ".sqlite", ".db",
    }
)


def is_binary_file(path: Path) -> bool:
    """Guess whether ``path`` is binary from its extension or a NUL byte near the start."""
    path = Path(path)
    if path.suffix.lower() in BINARY_EXTENSIONS:
        return True
    try:
        with path.open("rb") as f:
            head = f.read(BINARY_SNIFF_BYTES)
    except OSError:
        return False
    return b"\x00" in head


def is_large_file(path: Path, limit: int = LARGE_FILE_BYTES) -> bool:
    try:
        return Path(path).stat().st_size > limit
    except OSError:
        return False


def read_excerpt(path: Path, max_chars: int) -> str:
    """Read up to ``max_chars`` characters of a text file, replacing undecodable bytes."""
    with Path(path).open("r", encoding="utf-8", errors="replace") as f:
        return f.read(max_chars + 1)


def content_preview(path: Path, max_lines: int = 20) -> str:
    """First ``max_lines`` lines of a text file, with a marker when more follow."""
    lines = []
    try:
        with Path(path).open("r", encoding="utf-8", errors="replace") as f:
            for index, line in enumerate(f):
                if index >= max_lines:
                    lines.append("... (more lines)")
                    break
                lines.append(line.rstrip("\n"))
    except OSError:
        return ""
    return "\n".join(lines)


def format_size(size: int) -> str:
    """Human-readable byte count."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
