"""Virtual terminal screen

The screen is a fixed size grid of character cells. Rows are stored in a ring
buffer so that scrolling the screen up only replaces the top row instead of
moving every row of the grid.
"""
from collections import namedtuple

from termsvg.style import DEFAULT_STYLE
from termsvg.width import cluster_width

TAB_WIDTH = 8

Cell = namedtuple('Cell', ['cluster', 'width', 'style'])
Cell.__doc__ = 'Character cell of the grid'
Cell.cluster.__doc__ = ("Grapheme cluster displayed in the cell ('' for the "
                        "right half of a wide character)")
Cell.width.__doc__ = ('Number of columns used by the cluster (0 for the right '
                      'half of a wide character)')
Cell.style.__doc__ = 'Style of the cell'


def blank_cell(style=DEFAULT_STYLE):
    return Cell(' ', 1, style)


class Cursor:
    """Position of the cursor on the grid

    `col` is equal to the number of columns of the grid when the cursor
    has reached the end of a line and the next character must be drawn on
    the following line.
    """
    def __init__(self, row=0, col=0, visible=True):
        self.row = row
        self.col = col
        self.visible = visible

    def __repr__(self):
        return 'Cursor(row={}, col={}, visible={})'.format(self.row, self.col,
                                                          self.visible)


class Grid:
    """Fixed size matrix of character cells, cursor and active style"""
    def __init__(self, rows, cols):
        if rows <= 0 or cols <= 0:
            raise ValueError('Invalid grid size: {}x{}'.format(cols, rows))
        self.rows = rows
        self.cols = cols
        self.cursor = Cursor()
        self.style = DEFAULT_STYLE
        self._lines = [self._blank_line() for _ in range(rows)]
        self._base = 0
        self._saved_cursor = None
        # Line, column and cursor position right after the last cluster drawn
        self._last_drawn = None

    def _blank_line(self, style=DEFAULT_STYLE):
        return [blank_cell(style)] * self.cols

    def _blank(self):
        return blank_cell(self.style.erased())

    def line(self, row):
        """Return the cells of a row of the screen (mutable list)"""
        return self._lines[(self._base + row) % self.rows]

    def lines(self):
        """Return a snapshot of the screen as a list of tuples of cells"""
        return [tuple(self.line(row)) for row in range(self.rows)]

    def _clear_wide_remnants(self, line, column):
        """Blank the other half of the wide character found at `column`"""
        cell = line[column]
        if cell.width == 0 and column > 0:
            line[column - 1] = blank_cell(line[column - 1].style)
        elif cell.width == 2 and column + 1 < self.cols:
            line[column + 1] = blank_cell(cell.style)

    def _erase(self, line, start, end):
        if start >= end:
            return
        self._clear_wide_remnants(line, start)
        self._clear_wide_remnants(line, end - 1)
        line[start:end] = [self._blank()] * (end - start)

    def draw(self, cluster, width):
        """Draw a cluster at the cursor position and move the cursor forward

        If the cluster doesn't fit on the current line, the cursor first moves
        to the beginning of the next line, scrolling the screen if needed.
        """
        width = min(max(width, 1), 2, self.cols)
        if self.cursor.col + width > self.cols:
            self.carriage_return()
            self.line_feed()

        line = self.line(self.cursor.row)
        column = self.cursor.col
        self._clear_wide_remnants(line, column)
        if width == 2:
            self._clear_wide_remnants(line, column + 1)
            line[column + 1] = Cell('', 0, self.style)
        line[column] = Cell(cluster, width, self.style)

        self.cursor.col += width
        self._last_drawn = (line, column, self.cursor.row, self.cursor.col)

    def last_cluster(self):
        """Return the cluster drawn right before the cursor or None if the
        cursor moved since the last cluster was drawn"""
        if self._last_drawn is None:
            return None
        line, column, row, col = self._last_drawn
        if (row, col) != (self.cursor.row, self.cursor.col):
            return None
        # The line was scrolled off the screen
        if self.line(row) is not line:
            return None
        return line[column].cluster

    def join_previous(self, char):
        """Append a codepoint to the cluster drawn right before the cursor

        The cell becomes wide if the new cluster is wide (regional indicator
        pairs, emoji presentation selector) and there is room left on the line.
        """
        if self.last_cluster() is None:
            return False

        line, column, row, _ = self._last_drawn
        cell = line[column]
        cluster = cell.cluster + char
        width = cell.width
        if (cluster_width(cluster) > width and width == 1
                and column + 2 <= self.cols):
            self._clear_wide_remnants(line, column + 1)
            line[column + 1] = Cell('', 0, cell.style)
            width = 2
            self.cursor.col = column + 2
        line[column] = cell._replace(cluster=cluster, width=width)
        self._last_drawn = (line, column, row, self.cursor.col)
        return True

    def move_to(self, row, col):
        """Move the cursor to an absolute position (clamped to the screen)"""
        self.cursor.row = min(max(row, 0), self.rows - 1)
        self.cursor.col = min(max(col, 0), self.cols - 1)

    def move_by(self, rows, cols):
        """Move the cursor relatively to its position (clamped to the screen)"""
        self.move_to(self.cursor.row + rows,
                     min(self.cursor.col, self.cols - 1) + cols)

    def carriage_return(self):
        self.cursor.col = 0

    def line_feed(self):
        if self.cursor.row == self.rows - 1:
            self.scroll_up(1)
        else:
            self.cursor.row += 1

    def backspace(self):
        self.cursor.col = max(min(self.cursor.col, self.cols - 1) - 1, 0)

    def tab(self):
        next_stop = (self.cursor.col // TAB_WIDTH + 1) * TAB_WIDTH
        self.cursor.col = min(next_stop, self.cols - 1)

    def scroll_up(self, count=1):
        """Shift all rows up, dropping the top rows and adding blank rows at
        the bottom of the screen"""
        for _ in range(min(max(count, 0), self.rows)):
            # The top row becomes the bottom row
            self._lines[self._base] = self._blank_line(self.style.erased())
            self._base = (self._base + 1) % self.rows

    def erase_in_line(self, mode=0):
        """Erase part of the cursor line

        mode 0: from the cursor to the end of the line
        mode 1: from the beginning of the line to the cursor (inclusive)
        mode 2: the whole line
        """
        line = self.line(self.cursor.row)
        column = min(self.cursor.col, self.cols - 1)
        if mode == 0:
            self._erase(line, column, self.cols)
        elif mode == 1:
            self._erase(line, 0, column + 1)
        elif mode == 2:
            self._erase(line, 0, self.cols)

    def erase_in_display(self, mode=0):
        """Erase part of the screen

        mode 0: from the cursor to the end of the screen
        mode 1: from the beginning of the screen to the cursor (inclusive)
        mode 2 and 3: the whole screen
        """
        if mode == 0:
            self.erase_in_line(0)
            rows = range(self.cursor.row + 1, self.rows)
        elif mode == 1:
            self.erase_in_line(1)
            rows = range(0, self.cursor.row)
        elif mode in (2, 3):
            rows = range(0, self.rows)
        else:
            return
        for row in rows:
            self._erase(self.line(row), 0, self.cols)

    def insert_blanks(self, count=1):
        """Insert blank cells at the cursor, shifting the rest of the line to
        the right"""
        line = self.line(self.cursor.row)
        column = min(self.cursor.col, self.cols - 1)
        count = min(max(count, 1), self.cols - column)
        self._clear_wide_remnants(line, column)
        line[column:] = [self._blank()] * count + line[column:self.cols - count]
        if line[-1].width == 2:
            line[-1] = blank_cell(line[-1].style)

    def delete_chars(self, count=1):
        """Delete cells at the cursor, shifting the rest of the line to the
        left"""
        line = self.line(self.cursor.row)
        column = min(self.cursor.col, self.cols - 1)
        count = min(max(count, 1), self.cols - column)
        self._clear_wide_remnants(line, column)
        self._clear_wide_remnants(line, column + count - 1)
        line[column:] = line[column + count:] + [self._blank()] * count

    def erase_chars(self, count=1):
        """Blank cells starting at the cursor without moving the line"""
        column = min(self.cursor.col, self.cols - 1)
        end = min(column + max(count, 1), self.cols)
        self._erase(self.line(self.cursor.row), column, end)

    def save_cursor(self):
        self._saved_cursor = (self.cursor.row, self.cursor.col, self.style)

    def restore_cursor(self):
        if self._saved_cursor is None:
            self.move_to(0, 0)
            return
        row, col, self.style = self._saved_cursor
        self.move_to(row, col)

    def reset(self):
        """Return to the initial state: blank screen, cursor at home position"""
        self._lines = [self._blank_line() for _ in range(self.rows)]
        self._base = 0
        self.cursor = Cursor()
        self.style = DEFAULT_STYLE
        self._saved_cursor = None
        self._last_drawn = None
