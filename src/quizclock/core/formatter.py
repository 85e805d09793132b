"""Time formatting for countdown displays."""


def format_remaining(seconds: int) -> str:
    """Format *seconds* as zero-padded ``MM:SS``.

    Minutes are not capped, so 6000 seconds renders as ``100:00``.
    """
    if not isinstance(seconds, int) or isinstance(seconds, bool):
        raise TypeError(f"seconds must be an integer, got {type(seconds).__name__}")
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")
    return f"{seconds // 60:02d}:{seconds % 60:02d}"
