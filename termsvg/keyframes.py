"""Compression of a sequence of frames into keyframes

A keyframe only holds the rows of the screen that changed since the previous
keyframe. Keyframes closer in time than the coalescing threshold are merged
to limit the size of the animation when a program writes to the terminal in
bursts.
"""
from collections import namedtuple

from termsvg.atomize import group_runs
from termsvg.screen import blank_cell

Keyframe = namedtuple('Keyframe', ['time', 'rows', 'hold_until'])
Keyframe.__doc__ = 'Rows of the screen modified at a point in time'
Keyframe.time.__doc__ = 'Time in seconds at which the keyframe is displayed'
Keyframe.rows.__doc__ = 'Mapping between row numbers and tuples of runs'
Keyframe.hold_until.__doc__ = 'Time in seconds until which the keyframe lasts'

DEFAULT_COALESCE_THRESHOLD = 0.005


class KeyframeDiffer:
    """Turn frames into keyframes

    :param rows: Number of rows of the screen
    :param cols: Number of columns of the screen
    :param coalesce_threshold: Minimum time in seconds between the start of
    two distinct keyframes
    """
    def __init__(self, rows, cols, coalesce_threshold=DEFAULT_COALESCE_THRESHOLD):
        self.coalesce_threshold = coalesce_threshold
        blank_row = [blank_cell()] * cols
        # The screen is blank before the first frame
        self._state = [tuple(group_runs(row, blank_row)) for row in range(rows)]
        self._keyframes = []
        self._window_start = None

    def push(self, frame):
        """Register a new frame

        Return the keyframe created or updated by this frame, or None if the
        frame is identical to the screen described by the previous keyframes.
        """
        changed_rows = {row: runs for row, runs in enumerate(frame.rows)
                        if runs != self._state[row]}
        if not changed_rows:
            return None

        for row, runs in changed_rows.items():
            self._state[row] = runs

        if (self._keyframes and
                frame.time - self._window_start < self.coalesce_threshold):
            last_keyframe = self._keyframes[-1]
            rows = dict(last_keyframe.rows)
            rows.update(changed_rows)
            keyframe = last_keyframe._replace(time=frame.time, rows=rows)
            self._keyframes[-1] = keyframe
        else:
            keyframe = Keyframe(frame.time, changed_rows, None)
            self._keyframes.append(keyframe)
            self._window_start = frame.time

        return keyframe

    def finalize(self, end):
        """Return the list of keyframes, each one lasting until the next one
        and the last one lasting until `end`"""
        keyframes = []
        for keyframe, next_keyframe in zip(self._keyframes, self._keyframes[1:]):
            keyframes.append(keyframe._replace(hold_until=next_keyframe.time))
        if self._keyframes:
            last_keyframe = self._keyframes[-1]
            keyframes.append(
                last_keyframe._replace(hold_until=max(end, last_keyframe.time))
            )
        return keyframes
