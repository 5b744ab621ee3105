"""Text attributes of character cells and Select Graphic Rendition (SGR)

Colors are kept symbolic (palette indexes) until the animation is rendered so
that the same recording can be rendered with different themes.
"""
from collections import namedtuple

AnsiColor = namedtuple('AnsiColor', ['index'])
AnsiColor.__doc__ = 'One of the 16 colors of the terminal theme (0-15)'

ExtendedColor = namedtuple('ExtendedColor', ['index'])
ExtendedColor.__doc__ = 'Color of the 256 colors palette (0-255)'

RGBColor = namedtuple('RGBColor', ['red', 'green', 'blue'])
RGBColor.__doc__ = '24-bit color'

_STYLE_ATTRIBUTES = ['fg', 'bg', 'bold', 'italic', 'underline', 'inverse',
                     'strikethrough']
_Style = namedtuple('_Style', _STYLE_ATTRIBUTES)
_Style.__new__.__defaults__ = (None, None, False, False, False, False, False)
_Style.fg.__doc__ = 'Text color (None for the default foreground color)'
_Style.bg.__doc__ = 'Background color (None for the default background color)'
_Style.bold.__doc__ = 'Bold flag'
_Style.italic.__doc__ = 'Italic flag'
_Style.underline.__doc__ = 'Underline flag'
_Style.inverse.__doc__ = 'Reverse video flag'
_Style.strikethrough.__doc__ = 'Strikethrough flag'


class Style(_Style):
    """Visual attributes shared by a group of character cells"""
    def erased(self):
        """Style of a cell erased while this style is active"""
        return Style(bg=self.bg)


DEFAULT_STYLE = Style()

# SGR parameter -> (attribute, value)
_FLAGS = {
    1: ('bold', True),
    3: ('italic', True),
    4: ('underline', True),
    7: ('inverse', True),
    9: ('strikethrough', True),
    21: ('bold', False),
    22: ('bold', False),
    23: ('italic', False),
    24: ('underline', False),
    27: ('inverse', False),
    29: ('strikethrough', False),
}


def _clamp(value, highest):
    return min(max(value, 0), highest)


def _extended_color(params, index):
    """Decode the color following parameter 38 or 48

    Return a tuple (color, next_index) where color is None if the color
    specification is invalid.
    """
    try:
        mode = params[index]
        if mode == 5:
            return ExtendedColor(_clamp(params[index + 1], 255)), index + 2
        if mode == 2:
            red, green, blue = params[index + 1:index + 4]
            color = RGBColor(_clamp(red, 255), _clamp(green, 255),
                             _clamp(blue, 255))
            return color, index + 4
    except (IndexError, ValueError):
        pass
    # Skip the rest of the sequence since its meaning is unknown
    return None, len(params)


def apply_sgr(style, params):
    """Return the style resulting from applying SGR parameters to `style`

    :param style: Style active before the sequence
    :param params: List of integer parameters of the sequence (an empty list
    is equivalent to a reset)
    """
    if not params:
        return DEFAULT_STYLE

    changes = style._asdict()
    index = 0
    while index < len(params):
        code = params[index]
        index += 1
        if code == 0:
            changes = DEFAULT_STYLE._asdict()
        elif code in _FLAGS:
            attribute, value = _FLAGS[code]
            changes[attribute] = value
        elif 30 <= code <= 37:
            changes['fg'] = AnsiColor(code - 30)
        elif 90 <= code <= 97:
            changes['fg'] = AnsiColor(code - 90 + 8)
        elif code == 39:
            changes['fg'] = None
        elif 40 <= code <= 47:
            changes['bg'] = AnsiColor(code - 40)
        elif 100 <= code <= 107:
            changes['bg'] = AnsiColor(code - 100 + 8)
        elif code == 49:
            changes['bg'] = None
        elif code in (38, 48):
            color, index = _extended_color(params, index)
            if color is not None:
                changes['fg' if code == 38 else 'bg'] = color

    return Style(**changes)


def _color_parameters(color, base):
    if isinstance(color, AnsiColor):
        if color.index < 8:
            return [base + color.index]
        return [base + 60 + color.index - 8]
    if isinstance(color, ExtendedColor):
        return [base + 8, 5, color.index]
    return [base + 8, 2, color.red, color.green, color.blue]


def sgr_sequence(style):
    """Return the escape sequence that sets the attributes of `style` from a
    reset state"""
    params = [0]
    for code in (1, 3, 4, 7, 9):
        attribute, _ = _FLAGS[code]
        if getattr(style, attribute):
            params.append(code)
    if style.fg is not None:
        params.extend(_color_parameters(style.fg, 30))
    if style.bg is not None:
        params.extend(_color_parameters(style.bg, 40))

    return '\x1b[{}m'.format(';'.join(str(p) for p in params))
