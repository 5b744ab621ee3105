"""Escape sequence interpreter

The interpreter is a state machine consuming the output of a terminal
application one character at a time and applying its effects (text, cursor
moves, erasure, style changes) to a Grid. Each state has its own transition
method which returns the next state.

Sequences that cannot be interpreted are discarded: the interpreter never
fails on unexpected input.
"""
import codecs
import enum

from termsvg.atomize import parse_parameters
from termsvg.style import apply_sgr
from termsvg.width import cluster_width, extends_cluster, is_zero_width

BEL = '\x07'
BS = '\x08'
HT = '\x09'
LF = '\x0a'
VT = '\x0b'
FF = '\x0c'
CR = '\x0d'
CAN = '\x18'
SUB = '\x1a'
ESC = '\x1b'
REPLACEMENT_CHARACTER = '\ufffd'
CSI_C1 = '\x9b'
OSC_C1 = '\x9d'
ST_C1 = '\x9c'

# Final bytes of CSI sequences which are valid but have no effect on the
# rendering of the grid in this implementation
UNSUPPORTED_CSI_FINALS = set('ILMTZbcghlnqrtx')


class UnsupportedSequenceWarning(Warning):
    """Control sequence recognized but not implemented"""


class State(enum.Enum):
    GROUND = 'ground'
    ESCAPE = 'escape'
    ESCAPE_INTERMEDIATE = 'escape_intermediate'
    CSI_PARAM = 'csi_param'
    OSC_STRING = 'osc_string'


def _count(params, index=0):
    """Return a parameter used as a repetition count (missing or 0 means 1)"""
    try:
        return params[index] or 1
    except IndexError:
        return 1


def _mode(params):
    return params[0] if params else 0


class Interpreter:
    """Apply terminal output to a grid

    :param grid: Grid updated by the interpreter
    :param on_unsupported: Callable receiving an UnsupportedSequenceWarning
    each time a known but unimplemented sequence is discarded
    """
    def __init__(self, grid, on_unsupported=None):
        self.grid = grid
        self.on_unsupported = on_unsupported
        self.state = State.GROUND
        self._decoder = codecs.getincrementaldecoder('utf-8')('strict')
        self._params = ''
        self._private = ''
        self._intermediates = ''
        self._string_escape = False
        self._transitions = {
            State.GROUND: self._ground,
            State.ESCAPE: self._escape,
            State.ESCAPE_INTERMEDIATE: self._escape_intermediate,
            State.CSI_PARAM: self._csi_param,
            State.OSC_STRING: self._osc_string,
        }
        self._csi_commands = {
            'A': lambda p: self.grid.move_by(-_count(p), 0),
            'B': lambda p: self.grid.move_by(_count(p), 0),
            'C': lambda p: self.grid.move_by(0, _count(p)),
            'D': lambda p: self.grid.move_by(0, -_count(p)),
            'E': self._cursor_next_line,
            'F': self._cursor_previous_line,
            'G': self._cursor_column,
            '`': self._cursor_column,
            'H': self._cursor_position,
            'f': self._cursor_position,
            'd': self._cursor_row,
            'J': lambda p: self.grid.erase_in_display(_mode(p)),
            'K': lambda p: self.grid.erase_in_line(_mode(p)),
            '@': lambda p: self.grid.insert_blanks(_count(p)),
            'P': lambda p: self.grid.delete_chars(_count(p)),
            'X': lambda p: self.grid.erase_chars(_count(p)),
            'S': lambda p: self.grid.scroll_up(_count(p)),
            'm': self._select_graphic_rendition,
            's': lambda p: self.grid.save_cursor(),
            'u': lambda p: self.grid.restore_cursor(),
        }

    def feed(self, data):
        """Process a chunk of terminal output

        Bytes are decoded as UTF-8; a multibyte character may be split
        between consecutive chunks.
        Raise UnicodeDecodeError if `data` is not valid UTF-8, in which case
        none of the data has been applied to the grid.
        """
        if isinstance(data, bytes):
            try:
                data = self._decoder.decode(data)
            except UnicodeDecodeError:
                self._decoder.reset()
                raise

        for char in data:
            self.state = self._transitions[self.state](char)

    def _clear(self):
        self._params = ''
        self._private = ''
        self._intermediates = ''
        self._string_escape = False

    def _unsupported(self, sequence):
        if self.on_unsupported is not None:
            self.on_unsupported(
                UnsupportedSequenceWarning('Unsupported sequence: {!r}'.format(sequence))
            )

    def _ground(self, char):
        if char == ESC:
            self._clear()
            return State.ESCAPE
        if char == CSI_C1:
            self._clear()
            return State.CSI_PARAM
        if char == OSC_C1:
            self._clear()
            return State.OSC_STRING
        if char < ' ' or '\x7f' <= char < '\xa0':
            self._execute(char)
        else:
            self._print(char)
        return State.GROUND

    def _execute(self, char):
        """Apply a C0 control character"""
        if char == CR:
            self.grid.carriage_return()
        elif char in (LF, VT, FF):
            self.grid.line_feed()
        elif char == BS:
            self.grid.backspace()
        elif char == HT:
            self.grid.tab()

    def _print(self, char):
        # Surrogates and noncharacters U+FFFE and U+FFFF are not allowed in XML
        if '\ud800' <= char <= '\udfff' or char in '\ufffe\uffff':
            char = REPLACEMENT_CHARACTER
        last_cluster = self.grid.last_cluster()
        if last_cluster and extends_cluster(last_cluster, char):
            self.grid.join_previous(char)
        elif not is_zero_width(char):
            self.grid.draw(char, cluster_width(char))
        # Zero width characters with no base character are dropped

    def _escape(self, char):
        if char == '[':
            return State.CSI_PARAM
        if char in ']PX^_':
            return State.OSC_STRING
        if ' ' <= char <= '/':
            self._intermediates += char
            return State.ESCAPE_INTERMEDIATE
        if char == ESC:
            self._clear()
            return State.ESCAPE
        if char in (CAN, SUB):
            return State.GROUND
        if char < ' ':
            self._execute(char)
            return State.ESCAPE

        self._escape_dispatch(char)
        return State.GROUND

    def _escape_dispatch(self, char):
        if char == '7':
            self.grid.save_cursor()
        elif char == '8':
            self.grid.restore_cursor()
        elif char == 'D':
            self.grid.line_feed()
        elif char == 'E':
            self.grid.carriage_return()
            self.grid.line_feed()
        elif char == 'c':
            self.grid.reset()
        elif char in 'HMNOZ':
            self._unsupported(ESC + char)

    def _escape_intermediate(self, char):
        if ' ' <= char <= '/':
            self._intermediates += char
            return State.ESCAPE_INTERMEDIATE
        if char in (CAN, SUB):
            return State.GROUND
        if char == ESC:
            self._clear()
            return State.ESCAPE
        if char < ' ':
            self._execute(char)
            return State.ESCAPE_INTERMEDIATE
        # Character set designations and the like have no visible effect
        return State.GROUND

    def _csi_param(self, char):
        if '0' <= char <= '9' or char in ';:':
            self._params += char
            return State.CSI_PARAM
        if char in '<=>?':
            self._private += char
            return State.CSI_PARAM
        if ' ' <= char <= '/':
            self._intermediates += char
            return State.CSI_PARAM
        if '@' <= char <= '~':
            self._csi_dispatch(char)
            return State.GROUND
        if char == ESC:
            self._clear()
            return State.ESCAPE
        if char < ' ' and char not in (CAN, SUB):
            self._execute(char)
            return State.CSI_PARAM
        # Invalid character: abort the sequence
        return State.GROUND

    def _csi_dispatch(self, final):
        params = parse_parameters(self._params)
        sequence = 'CSI {}{}{}{}'.format(self._private, self._params,
                                         self._intermediates, final)
        if self._private or self._intermediates:
            if self._private == '?' and final in 'hl' and 25 in params:
                self.grid.cursor.visible = final == 'h'
            else:
                self._unsupported(sequence)
            return

        command = self._csi_commands.get(final)
        if command is not None:
            command(params)
        elif final in UNSUPPORTED_CSI_FINALS:
            self._unsupported(sequence)

    def _osc_string(self, char):
        if self._string_escape:
            self._string_escape = False
            if char == '\\':
                return State.GROUND
            # ESC not followed by '\' starts a new escape sequence
            self._clear()
            return self._escape(char)
        if char in (BEL, ST_C1, CAN, SUB):
            return State.GROUND
        if char == ESC:
            self._string_escape = True
        return State.OSC_STRING

    def _cursor_next_line(self, params):
        self.grid.move_by(_count(params), 0)
        self.grid.carriage_return()

    def _cursor_previous_line(self, params):
        self.grid.move_by(-_count(params), 0)
        self.grid.carriage_return()

    def _cursor_column(self, params):
        self.grid.move_to(self.grid.cursor.row, _count(params) - 1)

    def _cursor_row(self, params):
        self.grid.move_to(_count(params) - 1, self.grid.cursor.col)

    def _cursor_position(self, params):
        self.grid.move_to(_count(params, 0) - 1, _count(params, 1) - 1)

    def _select_graphic_rendition(self, params):
        self.grid.style = apply_sgr(self.grid.style, params)
