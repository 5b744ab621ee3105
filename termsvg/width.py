"""Display width of text

Widths are computed per grapheme cluster using wcwidth. A cluster is what a
terminal draws in one cell (or two adjacent cells for wide characters): a base
character followed by any number of zero width codepoints, an emoji sequence
joined with ZERO WIDTH JOINER, or a pair of regional indicators forming a flag.
"""
from collections import namedtuple

from wcwidth import wcswidth, wcwidth

ZERO_WIDTH_JOINER = '\u200d'

# Emoji skin tone modifiers attach to the preceding emoji
_EMOJI_MODIFIERS = range(0x1F3FB, 0x1F400)
_REGIONAL_INDICATORS = range(0x1F1E6, 0x1F200)

# Blocks of pictographic codepoints which may follow ZERO WIDTH JOINER in an
# emoji sequence
_PICTOGRAPHIC_RANGES = (
    range(0x00A9, 0x00AA),
    range(0x00AE, 0x00AF),
    range(0x203C, 0x203D),
    range(0x2049, 0x204A),
    range(0x2122, 0x2123),
    range(0x2139, 0x213A),
    range(0x2194, 0x21AA),
    range(0x2300, 0x2400),
    range(0x25A0, 0x2800),
    range(0x2900, 0x2980),
    range(0x2B00, 0x2C00),
    range(0x3030, 0x3031),
    range(0x303D, 0x303E),
    range(0x3297, 0x3298),
    range(0x3299, 0x329A),
    range(0x1F000, 0x1F1E6),
    range(0x1F200, 0x1FB00),
    range(0x1FC00, 0x1FFFE),
)

MeasuredText = namedtuple('MeasuredText', ['lines', 'columns'])
MeasuredText.__doc__ = 'Size of a block of text on a terminal'
MeasuredText.lines.__doc__ = 'Number of lines of the text'
MeasuredText.columns.__doc__ = 'Width of the widest line in columns'


def is_regional_indicator(char):
    return ord(char) in _REGIONAL_INDICATORS


def is_pictographic(char):
    codepoint = ord(char)
    return any(codepoint in block for block in _PICTOGRAPHIC_RANGES)


def is_zero_width(char):
    """Return True for codepoints that never start a cluster of their own

    This covers combining marks, variation selectors, ZERO WIDTH JOINER and
    emoji modifiers.
    """
    if char == ZERO_WIDTH_JOINER or ord(char) in _EMOJI_MODIFIERS:
        return True
    return wcwidth(char) == 0 and ord(char) >= 0x20


def extends_cluster(cluster, char):
    """Return True if `char` belongs to the cluster `cluster` (non empty)"""
    if is_zero_width(char):
        return True
    if cluster[-1] == ZERO_WIDTH_JOINER:
        return is_pictographic(char)
    # A flag is made of exactly two regional indicators
    return (len(cluster) == 1 and is_regional_indicator(cluster)
            and is_regional_indicator(char))


def cluster_width(cluster):
    """Return the number of columns (0, 1 or 2) used to display `cluster`

    Emoji sequences made of several codepoints (flags, skin tones, ZWJ
    sequences) are displayed as a single wide character.
    """
    if not cluster:
        return 0

    width = wcswidth(cluster)
    if width < 0:
        # Control characters have no width of their own
        width = sum(max(wcwidth(char), 0) for char in cluster)
    return min(width, 2)


def iter_clusters(text):
    """Split `text` into grapheme clusters

    A codepoint that cannot start a cluster and comes first in `text` makes up
    a cluster of its own.
    """
    cluster = ''
    for char in text:
        if cluster and extends_cluster(cluster, char):
            cluster += char
        else:
            if cluster:
                yield cluster
            cluster = char
    if cluster:
        yield cluster


def measure_text_area(text):
    """Return the number of lines and the width of the widest line of `text`"""
    lines = text.split('\n')
    columns = max(sum(cluster_width(c) for c in iter_clusters(line))
                  for line in lines)
    return MeasuredText(len(lines), columns)
