"""Conversion of a terminal recording into an SVG animation

The recording goes through the following steps:
    - output events are fed to the interpreter which updates the grid
    - after each event, the frame builder takes a snapshot of the grid
    - the keyframe differ only keeps the rows of the snapshot that changed
    - the keyframes are rendered as an SVG animation
"""
import logging
from collections import namedtuple

from termsvg import anim, config
from termsvg.frames import FrameBuilder
from termsvg.interpreter import Interpreter
from termsvg.keyframes import KeyframeDiffer
from termsvg.screen import Grid

# Streams of events
OUTPUT = 'o'

Header = namedtuple('Header', ['rows', 'cols', 'theme', 'idle_time_limit'])
Header.__new__.__defaults__ = (None, None)
Header.__doc__ = 'Description of the terminal used for the recording'
Header.rows.__doc__ = 'Number of rows of the terminal'
Header.cols.__doc__ = 'Number of columns of the terminal'
Header.theme.__doc__ = 'Theme of the terminal (config.Theme) or None'
Header.idle_time_limit.__doc__ = ('Maximum time in seconds between two events '
                                  'or None')

Event = namedtuple('Event', ['time', 'stream', 'data'])
Event.__doc__ = 'Chunk of data captured during the recording'
Event.time.__doc__ = 'Time elapsed since the beginning of the recording in seconds'
Event.stream.__doc__ = "'o' for terminal output, 'i' for keyboard input"
Event.data.__doc__ = 'Data captured (str or UTF-8 encoded bytes)'


class MalformedEventError(Exception):
    pass


def _check_time(index, event):
    time = event.time
    if not isinstance(time, (int, float)) or isinstance(time, bool) or time < 0:
        raise MalformedEventError('Event #{}: invalid time {!r}'.format(index, time))
    return time


def _feed(interpreter, index, event):
    """Feed the data of an output event to the interpreter

    Raise MalformedEventError if the data is neither text nor valid UTF-8
    """
    data = event.data
    if isinstance(data, str):
        try:
            data.encode('utf-8')
        except UnicodeEncodeError as exc:
            raise MalformedEventError('Event #{}: invalid text data'.format(index)) from exc
        interpreter.feed(data)
    elif isinstance(data, (bytes, bytearray)):
        try:
            interpreter.feed(bytes(data))
        except UnicodeDecodeError as exc:
            raise MalformedEventError('Event #{}: invalid UTF-8 data'.format(index)) from exc
    else:
        raise MalformedEventError('Event #{}: invalid data type {}'
                                  .format(index, type(data).__name__))


def convert(header, events, configuration=None, stop_event=None,
            diagnostics=None, logger=None):
    """Return an SVG animation of a terminal recording as bytes

    :param header: Header of the recording
    :param events: Iterable of events ordered by time
    :param configuration: config.Configuration instance or None for defaults
    :param stop_event: Object with an is_set() method (threading.Event) used
    to interrupt the conversion. The events processed so far are rendered.
    :param diagnostics: List to which malformed events and unsupported
    escape sequences are appended
    :param logger: Logger receiving diagnostics (defaults to the logger of
    this module)

    Raise config.ConfigError if the header or the configuration is invalid
    """
    if configuration is None:
        configuration = config.Configuration()
    if diagnostics is None:
        diagnostics = []
    if logger is None:
        logger = logging.getLogger(__name__)

    themes = config.default_themes()
    config.validate_header(header)
    config.validate_configuration(configuration, themes)
    theme = config.resolve_theme(configuration, header, themes)

    max_idle = configuration.max_idle
    if max_idle is None:
        max_idle = header.idle_time_limit

    def on_unsupported(warning):
        logger.debug(str(warning))
        diagnostics.append(warning)

    grid = Grid(header.rows, header.cols)
    interpreter = Interpreter(grid, on_unsupported)
    frame_builder = FrameBuilder(grid, configuration.split_words)
    differ = KeyframeDiffer(header.rows, header.cols,
                            configuration.coalesce_threshold)

    last_time = 0
    elapsed = 0
    for index, event in enumerate(events):
        if stop_event is not None and stop_event.is_set():
            logger.info('Conversion interrupted after {} events'.format(index))
            break

        try:
            time = _check_time(index, event)
            # Shorten long pauses, ignore timestamps going backward
            gap = max(time - last_time, 0)
            if max_idle is not None:
                gap = min(gap, max_idle)
            last_time = max(last_time, time)
            elapsed += gap
            if event.stream != OUTPUT:
                continue
            _feed(interpreter, index, event)
        except MalformedEventError as exc:
            logger.warning('Skipping malformed event: {}'.format(exc))
            diagnostics.append(exc)
            continue

        frame = frame_builder.build(elapsed / configuration.speed_factor)
        if frame is not None:
            differ.push(frame)

    duration = elapsed / configuration.speed_factor + configuration.trailing_hold
    keyframes = differ.finalize(duration)
    logger.debug('Rendering {} keyframes ({:.3f}s)'.format(len(keyframes), duration))
    return anim.render_animation(keyframes, (header.cols, header.rows), duration,
                                 configuration, theme)
