"""Snapshots of the grid as rows of style runs"""
from collections import namedtuple

from termsvg.atomize import group_runs

Frame = namedtuple('Frame', ['time', 'rows'])
Frame.__doc__ = 'State of the screen at a point in time'
Frame.time.__doc__ = 'Time of the frame in seconds'
Frame.rows.__doc__ = 'Tuple made of the tuple of runs of each row of the screen'


class FrameBuilder:
    """Build frames from the successive states of a grid

    The content of each row is hashed so that only the rows modified since
    the previous frame are grouped into runs again.
    """
    def __init__(self, grid, split_words=False):
        self.grid = grid
        self.split_words = split_words
        blank_rows = [tuple(grid.line(row)) for row in range(grid.rows)]
        self._row_hashes = [hash(cells) for cells in blank_rows]
        self._rows = [tuple(group_runs(row, cells, split_words))
                      for row, cells in enumerate(blank_rows)]

    def build(self, time):
        """Return a Frame for the current state of the grid, or None if no
        cell changed since the previous frame"""
        changed = False
        for row in range(self.grid.rows):
            cells = tuple(self.grid.line(row))
            row_hash = hash(cells)
            if row_hash != self._row_hashes[row]:
                self._row_hashes[row] = row_hash
                self._rows[row] = tuple(group_runs(row, cells, self.split_words))
                changed = True

        if not changed:
            return None
        return Frame(time, tuple(self._rows))
