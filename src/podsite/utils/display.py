"""Formatting helpers for console output."""


def format_bytes(size: int) -> str:
    """Format a byte count as B, KB or MB.

    Examples:
        >>> format_bytes(512)
        '512 B'
        >>> format_bytes(2048)
        '2.0 KB'
        >>> format_bytes(3 * 1024 * 1024)
        '3.00 MB'
    """
    if size < 1024:
        return f"{size} B"
    kb = size / 1024
    if kb < 1024:
        return f"{kb:.1f} KB"
    mb = kb / 1024
    return f"{mb:.2f} MB"
