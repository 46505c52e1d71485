"""
Empty-line tokenizer.

Line-oriented external tools may drop blank lines. Before handing text to
such a tool every empty line is replaced with a sentinel token, and the
tool's output is decoded afterwards. Lines that already consist only of
sentinels are escaped with one extra sentinel, so ``decode`` is an exact
inverse of ``encode`` for every input.
"""

EMPTY_LINE_TOKEN = "\x1a"

_DIFF_PAYLOAD_PREFIXES = ("+", "-", " ")


def _is_token_run(piece: str) -> bool:
    return piece == EMPTY_LINE_TOKEN * len(piece)


def _encode_piece(piece: str) -> str:
    if _is_token_run(piece):
        return piece + EMPTY_LINE_TOKEN
    return piece


def _decode_piece(piece: str) -> str:
    if piece and _is_token_run(piece):
        return piece[:-1]
    return piece


def encode(text: str) -> str:
    """
    Replace every empty line with ``EMPTY_LINE_TOKEN``.

    The piece after a final newline is not a line and stays empty, so the
    encoded text has exactly as many newlines as the original.

    Args:
        text: Text to encode.

    Returns:
        Encoded text with no empty lines.
    """
    pieces = text.split("\n")
    last = len(pieces) - 1
    encoded = [
        piece if (index == last and not piece) else _encode_piece(piece)
        for index, piece in enumerate(pieces)
    ]
    return "\n".join(encoded)


def decode(text: str) -> str:
    """Inverse of ``encode``."""
    return "\n".join(_decode_piece(piece) for piece in text.split("\n"))


def decode_diff(diff_text: str) -> str:
    """
    Decode the payload of every body line of a unified diff.

    Only lines from the first hunk header on are touched, and only their
    text after the one-character ``+``, ``-`` or space prefix.
    """
    lines = diff_text.split("\n")
    in_body = False
    for index, line in enumerate(lines):
        if line.startswith("@@"):
            in_body = True
            continue
        if in_body and line[:1] in _DIFF_PAYLOAD_PREFIXES:
            lines[index] = line[0] + _decode_piece(line[1:])
    return "\n".join(lines)
