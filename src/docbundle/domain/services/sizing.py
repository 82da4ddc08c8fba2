"""Size reporting for served text."""


def size_kb(text: str) -> int:
    """UTF-8 size rounded up to whole kilobytes."""
    return (len(text.encode("utf-8")) + 1023) // 1024
