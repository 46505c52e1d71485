"""
Line splitting with explicit offset tables.

Lines keep their terminator so that offsets computed from them address the
original text exactly, whatever its line endings.
"""


def split_lines(text: str) -> list[str]:
    """
    Split text into lines, keeping each line's ``\\n`` terminator.

    The last line has no terminator when the text does not end with a
    newline. An empty text has no lines.

    Args:
        text: Text to split.

    Returns:
        List of lines whose concatenation is ``text``.
    """
    lines: list[str] = []
    start = 0
    while True:
        newline = text.find("\n", start)
        if newline == -1:
            break
        lines.append(text[start:newline + 1])
        start = newline + 1
    if start < len(text):
        lines.append(text[start:])
    return lines


def line_offsets(lines: list[str]) -> list[int]:
    """
    Build the offset table for a list of lines from ``split_lines``.

    Entry ``i`` is the offset where line ``i`` starts; the extra last entry
    is the total length, so line ``i`` spans ``offsets[i]:offsets[i + 1]``.
    """
    offsets = [0]
    for line in lines:
        offsets.append(offsets[-1] + len(line))
    return offsets


def strip_line_ending(line: str) -> str:
    """Remove one trailing ``\\n`` or ``\\r\\n`` from a line."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


class LineTable:
    """Lines of one text together with their offset table."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.lines = split_lines(text)
        self.offsets = line_offsets(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def has_line(self, number: int) -> bool:
        """Whether the 1-based line number exists."""
        return 1 <= number <= len(self.lines)

    def span(self, number: int) -> tuple[int, int]:
        """Offsets ``(start, end)`` of a 1-based line, terminator included."""
        return self.offsets[number - 1], self.offsets[number]

    def content(self, number: int) -> str:
        """Text of a 1-based line without its terminator."""
        return strip_line_ending(self.lines[number - 1])
