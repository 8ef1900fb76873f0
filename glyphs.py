"""
Segment Clock - Glyph Tables
Seven segment digit patterns and the tiny label font. Constants only.

Segment layout:

     AAA
    F   B
    F   B
     GGG
    E   C
    E   C
     DDD
"""

SEGMENTS = "ABCDEFG"

# ============================================================================
# DIGIT PATTERNS
# ============================================================================

# One string per digit, "." lights the segment at that position (A..G)
_DIGIT_ROWS = (
    "...... ",  # 0
    " ..    ",  # 1
    ".. .. .",  # 2
    "....  .",  # 3
    " ..  ..",  # 4
    ". .. ..",  # 5
    ". .....",  # 6
    "...    ",  # 7
    ".......",  # 8
    "...  ..",  # 9
)

# Three neutral bars for anything that is not a digit
_UNKNOWN_ROW = ".  .  ."


def _segments_from_row(row):
    return frozenset(segment for segment, mark in zip(SEGMENTS, row) if mark != " ")


DIGIT_PATTERNS = tuple(_segments_from_row(row) for row in _DIGIT_ROWS)
UNKNOWN_PATTERN = _segments_from_row(_UNKNOWN_ROW)


def pattern_for(digit):
    """
    Get the lit segments for a digit.

    Args:
        digit (int): Digit value, anything outside 0-9 is unknown

    Returns:
        frozenset: Segment letters to draw
    """
    if isinstance(digit, int) and not isinstance(digit, bool) and 0 <= digit <= 9:
        return DIGIT_PATTERNS[digit]
    return UNKNOWN_PATTERN

# ============================================================================
# LABEL FONT (3x5)
# ============================================================================

LABEL_WIDTH = 3
LABEL_HEIGHT = 5

LABEL_FONT = {
    "0": ("111", "101", "101", "101", "111"),
    "1": ("010", "110", "010", "010", "111"),
    "2": ("111", "001", "111", "100", "111"),
    "3": ("111", "001", "111", "001", "111"),
    "4": ("101", "101", "111", "001", "001"),
    "5": ("111", "100", "111", "001", "111"),
    "6": ("111", "100", "111", "101", "111"),
    "7": ("111", "001", "010", "100", "100"),
    "8": ("111", "101", "111", "101", "111"),
    "9": ("111", "101", "111", "001", "111"),
    "A": ("010", "101", "111", "101", "101"),
    "B": ("110", "101", "110", "101", "110"),
    "C": ("011", "100", "100", "100", "011"),
    "D": ("110", "101", "101", "101", "110"),
    "E": ("111", "100", "110", "100", "111"),
    "F": ("111", "100", "110", "100", "100"),
    "G": ("011", "100", "101", "101", "011"),
    "H": ("101", "101", "111", "101", "101"),
    "I": ("111", "010", "010", "010", "111"),
    "J": ("001", "001", "001", "101", "010"),
    "K": ("101", "101", "110", "101", "101"),
    "L": ("100", "100", "100", "100", "111"),
    "M": ("101", "111", "111", "101", "101"),
    "N": ("110", "101", "101", "101", "101"),
    "O": ("010", "101", "101", "101", "010"),
    "P": ("110", "101", "110", "100", "100"),
    "Q": ("010", "101", "101", "110", "011"),
    "R": ("110", "101", "110", "101", "101"),
    "S": ("011", "100", "010", "001", "110"),
    "T": ("111", "010", "010", "010", "010"),
    "U": ("101", "101", "101", "101", "111"),
    "V": ("101", "101", "101", "101", "010"),
    "W": ("101", "101", "111", "111", "101"),
    "X": ("101", "101", "010", "101", "101"),
    "Y": ("101", "101", "010", "010", "010"),
    "Z": ("111", "001", "010", "100", "111"),
    "/": ("001", "001", "010", "100", "100"),
    "_": ("000", "000", "000", "000", "111"),
    "-": ("000", "000", "111", "000", "000"),
    "+": ("000", "010", "111", "010", "000"),
    ",": ("000", "000", "000", "010", "100"),
    ".": ("000", "000", "000", "000", "010"),
    ":": ("000", "010", "000", "010", "000"),
    " ": ("000", "000", "000", "000", "000"),
}

BLANK_GLYPH = LABEL_FONT[" "]


def label_glyph(char):
    """Rows for a label character; lower case maps to upper, unknown is blank"""
    return LABEL_FONT.get(char.upper(), BLANK_GLYPH)
