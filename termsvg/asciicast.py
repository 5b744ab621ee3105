"""asciicast recordings

This module decodes terminal recordings in asciicast format into the header
and events consumed by the conversion engine. Both v1 and v2 format are
supported for decoding. For encoding, only the v2 format is available. The
specification of both formats are available here:
    [1] https://github.com/asciinema/asciinema/blob/develop/doc/asciicast-v1.md
    [2] https://github.com/asciinema/asciinema/blob/develop/doc/asciicast-v2.md
"""
import abc
import json
from collections import namedtuple
from typing import Iterable

from termsvg import config
from termsvg.engine import OUTPUT, Event, Header


class AsciiCastError(Exception):
    pass


class AsciiCastV2Record(abc.ABC):
    """Generic Asciicast v2 record format"""
    @abc.abstractmethod
    def to_json_line(self):
        raise NotImplementedError

    @classmethod
    def from_json_line(cls, line):
        """Raise AsciiCastError if line is not a valid asciicast v2 record"""
        try:
            json_value = json.loads(line)
        except json.JSONDecodeError as exc:
            raise AsciiCastError from exc
        if isinstance(json_value, dict):
            return AsciiCastV2Header.from_json_line(line)
        if isinstance(json_value, list):
            return AsciiCastV2Event.from_json_line(line)
        truncated_line = line if len(line) < 20 else '{}...'.format(line[:20])
        raise AsciiCastError('Unknown record type: "{}"'.format(truncated_line))


_AsciiCastV2Theme = namedtuple('AsciiCastV2Theme', ['fg', 'bg', 'palette'])


class AsciiCastV2Theme(_AsciiCastV2Theme):
    """Color theme of the terminal.

    All colors must use the '#rrggbb' format

    fg: default text color
    bg: default background colors
    palette: colon separated list of 8 or 16 terminal colors
    """
    def __new__(cls, fg, bg, palette):
        if not config.is_color(fg):
            raise AsciiCastError('Invalid foreground color: {}'.format(fg))
        if not config.is_color(bg):
            raise AsciiCastError('Invalid background color: {}'.format(bg))
        if not isinstance(palette, str):
            raise AsciiCastError('Invalid palette: {!r}'.format(palette))

        colors = palette.split(':')
        for count in (16, 8):
            if len(colors) >= count and all(config.is_color(c) for c in colors[:count]):
                return super().__new__(cls, fg, bg, ':'.join(colors[:count]))
        raise AsciiCastError('Invalid palette: the first 8 or 16 colors must be valid')

    def to_theme(self):
        return config.Theme(self.fg, self.bg, self.palette.split(':'))


_AsciiCastV2Header = namedtuple('AsciiCastV2Header', ['version', 'width', 'height', 'theme',
                                                      'idle_time_limit'])


class AsciiCastV2Header(AsciiCastV2Record, _AsciiCastV2Header):
    """Header record

    version: Version of the asciicast file format
    width: Initial number of columns of the terminal
    height: Initial number of lines of the terminal
    theme: Color theme of the terminal
    idle_time_limit: Maximum time in seconds between two events
    """
    types = {
        'version': int,
        'width': int,
        'height': int,
        'theme': (type(None), AsciiCastV2Theme),
        'idle_time_limit': (type(None), int, float)
    }

    def __new__(cls, version, width, height, theme=None, idle_time_limit=None):
        self = super(AsciiCastV2Header, cls).__new__(cls, version, width, height, theme,
                                                     idle_time_limit)
        for attr_name in cls._fields:
            attr = getattr(self, attr_name)
            if not isinstance(attr, cls.types[attr_name]):
                raise AsciiCastError('Invalid type for attribute {}: {} (expected one of {})'
                                     .format(attr_name, type(attr), cls.types[attr_name]))
        if version != 2:
            raise AsciiCastError('Only asciicast v2 format is supported')
        if width <= 0 or height <= 0:
            raise AsciiCastError('Invalid terminal size: {}x{}'.format(width, height))
        return self

    def to_json_line(self):
        attributes = self._asdict()
        if self.theme is not None:
            attributes['theme'] = self.theme._asdict()
        else:
            del attributes['theme']

        if attributes['idle_time_limit'] is None:
            del attributes['idle_time_limit']

        return json.dumps(attributes, ensure_ascii=False)

    @classmethod
    def from_json_line(cls, line):
        attributes = json.loads(line)
        filtered_attributes = {attr: attributes.get(attr) for attr in AsciiCastV2Header._fields}
        theme = filtered_attributes['theme']
        if theme is not None:
            if not isinstance(theme, dict):
                raise AsciiCastError('Invalid theme: {!r}'.format(theme))
            filtered_attributes['theme'] = AsciiCastV2Theme(theme.get('fg'),
                                                            theme.get('bg'),
                                                            theme.get('palette'))

        return cls(**filtered_attributes)

    def to_header(self):
        theme = self.theme.to_theme() if self.theme is not None else None
        return Header(self.height, self.width, theme, self.idle_time_limit)


_AsciiCastV2Event = namedtuple('AsciiCastV2Event', ['time', 'event_type', 'event_data'])


class AsciiCastV2Event(AsciiCastV2Record, _AsciiCastV2Event):
    """Event record

    time: Time elapsed since the beginning of the recording in seconds
    event_type: Type 'o' if the data was captured on the standard output of the terminal, type
                'i' if it was captured on the standard input
    event_data: Data captured during the recording
    """
    types = {
        'time': (int, float),
        'event_type': (str,),
        'event_data': (str,),
    }

    def __new__(cls, *args, **kwargs):
        self = super(AsciiCastV2Event, cls).__new__(cls, *args, **kwargs)
        for attr_name in AsciiCastV2Event._fields:
            attr = getattr(self, attr_name)
            if not isinstance(attr, cls.types[attr_name]):
                raise AsciiCastError('Invalid type for attribute {}: {} (expected one of {})'
                                     .format(attr_name, type(attr), cls.types[attr_name]))
        return self

    def to_json_line(self):
        attributes = [self.time, self.event_type, self.event_data]
        return json.dumps(attributes, ensure_ascii=False)

    @classmethod
    def from_json_line(cls, line):
        try:
            time, event_type, event_data = json.loads(line)
        except (json.JSONDecodeError, ValueError, TypeError) as exc:
            raise AsciiCastError from exc

        return cls(time, event_type, event_data)

    def to_event(self):
        return Event(self.time, self.event_type, self.event_data)


def _read_v1_records(data):
    v1_header_attributes = {
        'version',
        'width',
        'height',
        'stdout'
    }
    try:
        json_dict = json.loads(data)
    except json.JSONDecodeError as exc:
        raise AsciiCastError from exc
    if not isinstance(json_dict, dict):
        raise AsciiCastError('Invalid asciicast v1 file')
    missing_attributes = v1_header_attributes - set(json_dict)
    if missing_attributes:
        raise AsciiCastError('Missing attributes in asciicast v1 file: {}'
                             .format(', '.join(sorted(missing_attributes))))

    if json_dict['version'] != 1:
        raise AsciiCastError('This function can only decode asciicast v1 data')

    yield AsciiCastV2Header(2, json_dict['width'], json_dict['height'], None, None)

    if not isinstance(json_dict['stdout'], Iterable):
        raise AsciiCastError('Invalid type for stdout attribute (expected Iterable): {}'
                             .format(json_dict['stdout']))

    time = 0
    for event in json_dict['stdout']:
        try:
            time_elapsed, event_data = event
        except (TypeError, ValueError) as exc:
            raise AsciiCastError from exc

        if not isinstance(time_elapsed, (int, float)) or not isinstance(event_data, str):
            raise AsciiCastError('Invalid type for event: got object "{}" but expected '
                                 'type Tuple[Union[int, float], str]'.format(event))
        time += time_elapsed
        yield AsciiCastV2Event(time, OUTPUT, event_data)


def read_records(filename):
    """Yield asciicast v2 records from the file

    The records in the file may themselves be in either asciicast v1 or v2 format (although
    there must be only one record format version in the file).
    Raise AsciiCastError if a record is invalid"""
    with open(filename, 'r', encoding='utf-8') as cast_file:
        data = cast_file.read()

    lines = [line for line in data.splitlines() if line.strip()]
    try:
        records = [AsciiCastV2Record.from_json_line(line) for line in lines]
    except AsciiCastError:
        yield from _read_v1_records(data)
        return

    yield from records


def read_recording(filename):
    """Return the header and the list of events of an asciicast file

    Raise AsciiCastError if the file is not a valid recording
    """
    records = iter(read_records(filename))
    try:
        header = next(records)
    except StopIteration:
        raise AsciiCastError('Empty recording: {}'.format(filename)) from None
    if not isinstance(header, AsciiCastV2Header):
        raise AsciiCastError('The first record of the recording must be a header')

    events = []
    for record in records:
        if not isinstance(record, AsciiCastV2Event):
            raise AsciiCastError('Unexpected header in the middle of the recording')
        events.append(record.to_event())

    return header.to_header(), events
