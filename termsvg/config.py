"""Rendering configuration and color themes"""
import configparser
import pkgutil
import string
from collections import namedtuple

PKG_THEMES_PATH = 'data/themes.ini'
DEFAULT_THEME = 'xterm'

# Default size of a character cell for a 14px monospace font
CELL_WIDTH = 8
CELL_HEIGHT = 17


class ConfigError(Exception):
    pass


def _xterm_colors():
    """Return the 256 colors of the xterm palette"""
    ansi_colors = [
        '#000000', '#cd0000', '#00cd00', '#cdcd00',
        '#0000ee', '#cd00cd', '#00cdcd', '#e5e5e5',
        '#7f7f7f', '#ff0000', '#00ff00', '#ffff00',
        '#5c5cff', '#ff00ff', '#00ffff', '#ffffff',
    ]
    levels = [0, 95, 135, 175, 215, 255]
    cube = ['#{:02x}{:02x}{:02x}'.format(red, green, blue)
            for red in levels for green in levels for blue in levels]
    grays = ['#{0:02x}{0:02x}{0:02x}'.format(level) for level in range(8, 240, 10)]
    return ansi_colors + cube + grays


XTERM_COLORS = _xterm_colors()


def is_color(color):
    return (isinstance(color, str) and len(color) == 7 and color[0] == '#' and
            all(c in string.hexdigits for c in color[1:]))


_Theme = namedtuple('_Theme', ['foreground', 'background', 'palette'])


class Theme(_Theme):
    """Colors of the terminal

    All colors must use the '#rrggbb' format

    foreground: default text color
    background: default background color
    palette: sequence of 8, 16 or up to 256 colors. Colors missing from the
    palette are taken from the xterm palette.
    """
    def __new__(cls, foreground, background, palette):
        if not is_color(foreground):
            raise ConfigError('Invalid foreground color: {}'.format(foreground))
        if not is_color(background):
            raise ConfigError('Invalid background color: {}'.format(background))
        palette = tuple(palette)
        if not 8 <= len(palette) <= 256:
            raise ConfigError('Invalid palette: expected between 8 and 256 '
                              'colors but got {}'.format(len(palette)))
        for color in palette:
            if not is_color(color):
                raise ConfigError('Invalid palette color: {}'.format(color))
        return super().__new__(cls, foreground, background, palette)

    def color(self, index):
        """Return the color of the palette at `index` (0-255)"""
        if index < len(self.palette):
            return self.palette[index]
        if len(self.palette) == 8 and index < 16:
            # Bright colors default to their normal counterpart
            return self.palette[index - 8]
        return XTERM_COLORS[index]


def conf_to_themes(configuration):
    """Return a mapping between lower case theme names and themes

    :param configuration: Content of a configuration file in INI format where
    each section is a theme
    """
    parser = configparser.ConfigParser()
    try:
        parser.read_string(configuration)
    except configparser.Error as exc:
        raise ConfigError('Invalid theme configuration') from exc

    themes = {}
    for name in parser.sections():
        section = parser[name]
        palette = []
        for index in range(256):
            color = section.get('color{}'.format(index))
            if color is None:
                break
            palette.append(color)
        themes[name.lower()] = Theme(section.get('foreground'),
                                     section.get('background'),
                                     palette)
    return themes


def default_themes():
    """Return mapping between the name of a theme and the theme itself"""
    data = pkgutil.get_data(__name__, PKG_THEMES_PATH).decode('utf-8')
    return conf_to_themes(data)


_CONFIGURATION_FIELDS = [
    'font_family',
    'font_size',
    'theme',
    'loop',
    'speed_factor',
    'coalesce_threshold',
    'trailing_hold',
    'max_idle',
    'cell_width',
    'cell_height',
    'split_words',
]
_Configuration = namedtuple('_Configuration', _CONFIGURATION_FIELDS)
_Configuration.__new__.__defaults__ = ('DejaVu Sans Mono', 14, None, True, 1.0,
                                       0.005, 1.0, None, CELL_WIDTH, CELL_HEIGHT,
                                       True)


class Configuration(_Configuration):
    """Options of the conversion of a recording to an animation

    font_family: font used in the CSS of the animation
    font_size: font size in pixels
    theme: name of a theme, instance of Theme, or None to use the theme of
    the recording (or the default theme if the recording has none)
    loop: replay the animation indefinitely
    speed_factor: playback speed (2 is twice as fast as the recording)
    coalesce_threshold: minimum time in seconds between two keyframes
    trailing_hold: time in seconds during which the last frame stays visible
    max_idle: maximum time in seconds between two events (None to use the
    idle time limit of the recording)
    cell_width, cell_height: size of a character cell in pixels
    split_words: render each word of a line as a separate text element
    """


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_configuration(configuration, themes=None):
    """Raise ConfigError if an option of `configuration` is invalid"""
    if not _is_number(configuration.speed_factor) or configuration.speed_factor <= 0:
        raise ConfigError('Invalid speed factor (must be greater than 0): {}'
                          .format(configuration.speed_factor))

    for name in ('coalesce_threshold', 'trailing_hold'):
        value = getattr(configuration, name)
        if not _is_number(value) or value < 0:
            raise ConfigError('Invalid value for {} (must not be negative): {}'
                              .format(name, value))

    max_idle = configuration.max_idle
    if max_idle is not None and (not _is_number(max_idle) or max_idle <= 0):
        raise ConfigError('Invalid maximum idle time (must be greater than 0): {}'
                          .format(max_idle))

    for name in ('font_size', 'cell_width', 'cell_height'):
        value = getattr(configuration, name)
        if not _is_number(value) or value <= 0:
            raise ConfigError('Invalid value for {} (must be greater than 0): {}'
                              .format(name, value))

    if not isinstance(configuration.font_family, str) or not configuration.font_family:
        raise ConfigError('Invalid font family: {!r}'.format(configuration.font_family))

    theme = configuration.theme
    if isinstance(theme, str):
        if themes is None:
            themes = default_themes()
        if theme.lower() not in themes:
            raise ConfigError('Unknown theme "{}" (available themes: {})'
                              .format(theme, ', '.join(sorted(themes))))
    elif theme is not None and not isinstance(theme, Theme):
        raise ConfigError('Invalid theme: {!r}'.format(theme))

    return configuration


def validate_header(header):
    """Raise ConfigError if the geometry of the recording is invalid"""
    for name in ('rows', 'cols'):
        value = getattr(header, name, None)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ConfigError('Invalid value for {} in header (expected a '
                              'positive integer): {!r}'.format(name, value))

    theme = getattr(header, 'theme', None)
    if theme is not None and not isinstance(theme, Theme):
        raise ConfigError('Invalid theme in header: {!r}'.format(theme))

    return header


def resolve_theme(configuration, header, themes=None):
    """Return the theme used to render the animation

    The theme of the configuration has priority over the theme of the
    recording, the default theme is used if neither define one.
    """
    if isinstance(configuration.theme, Theme):
        return configuration.theme

    if themes is None:
        themes = default_themes()
    if isinstance(configuration.theme, str):
        return themes[configuration.theme.lower()]
    if header.theme is not None:
        return header.theme
    return themes[DEFAULT_THEME]
