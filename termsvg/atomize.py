"""Split text into styled grapheme clusters and group them into runs"""
import re
from collections import namedtuple
from itertools import groupby

from termsvg.style import DEFAULT_STYLE, apply_sgr
from termsvg.width import iter_clusters

Token = namedtuple('Token', ['cluster', 'style'])
Token.__doc__ = 'Grapheme cluster tagged with the style active at its position'

Run = namedtuple('Run', ['row', 'column', 'style', 'text'])
Run.__doc__ = 'Consecutive cells of a row sharing the same style'
Run.row.__doc__ = 'Row of the grid'
Run.column.__doc__ = 'Column of the first cell of the run'
Run.style.__doc__ = 'Style shared by all the cells of the run'
Run.text.__doc__ = ("Tuple of clusters, one per cell (continuation cells of "
                    "wide characters hold '')")

# Escape sequences found in raw terminal output. Only CSI sequences ending with
# 'm' (SGR) have an effect on the tokens, everything else is dropped.
ESCAPE_SEQUENCE_RE = re.compile(
    r'\x1b\[(?P<params>[0-?]*)[ -/]*(?P<final>[@-~])'  # CSI
    r'|\x1b[\]PX^_].*?(?:\x07|\x1b\\|\Z)'              # OSC, DCS, PM, APC
    r'|\x1b[ -/]*[0-~]'                                 # Other escapes
    r'|\x1b',                                           # Truncated escape
    re.DOTALL
)


def parse_parameters(params):
    """Convert the parameter string of a CSI sequence into a list of integers

    Empty parameters default to 0 and sub-parameters separated by ':' are
    handled as regular parameters.
    """
    if not params:
        return []
    values = []
    for value in params.replace(':', ';').split(';'):
        try:
            values.append(int(value))
        except ValueError:
            values.append(0)
    return values


def atomize(text, style=DEFAULT_STYLE):
    """Return the list of tokens making up `text`

    `text` may contain escape sequences: SGR sequences change the style of the
    following clusters, other escape sequences are removed.

    :param text: Plain text or raw terminal output
    :param style: Style active at the start of the text
    """
    tokens = []
    position = 0
    for match in ESCAPE_SEQUENCE_RE.finditer(text):
        tokens.extend(Token(c, style)
                      for c in iter_clusters(text[position:match.start()]))
        if match.group('final') == 'm':
            params = match.group('params')
            if not params.startswith(('?', '>', '<', '=')):
                style = apply_sgr(style, parse_parameters(params))
        position = match.end()
    tokens.extend(Token(c, style) for c in iter_clusters(text[position:]))
    return tokens


class ConsecutiveWithSameAttributes:
    """Callable to be used as a key for itertools.groupby to group together
    consecutive cells of a row with the same style and, when words are split,
    the same kind of content (whitespace or not)"""
    def __init__(self, split_words=False):
        self.split_words = split_words

    def __call__(self, cell):
        if self.split_words:
            return cell.style, cell.cluster.isspace()
        return cell.style, None


def group_runs(row, cells, split_words=False):
    """Return the list of runs making up a row of the grid

    :param row: Index of the row
    :param cells: Sequence of cells of the row
    :param split_words: Also start a new run at each boundary between
    whitespace and non whitespace content
    """
    runs = []
    column = 0
    key = ConsecutiveWithSameAttributes(split_words)
    for (style, _), group in groupby(cells, key):
        text = tuple(cell.cluster for cell in group)
        runs.append(Run(row, column, style, text))
        column += len(text)
    return runs
