"""SVG rendering of keyframes

The animation is a single SVG document. Each row of the screen is an SVG
group holding one element per keyframe modifying the row; SMIL 'set'
elements toggle the visibility of these elements so that at any time only
the latest version of the row is displayed. All timings are relative to a
clock animation which restarts at the end of the animation when looping.
"""
import os
from collections import defaultdict

from lxml import etree

from termsvg.style import AnsiColor, ExtendedColor

# XML namespaces
SVG_NS = 'http://www.w3.org/2000/svg'
XLINK_NS = 'http://www.w3.org/1999/xlink'

NAMESPACES = {
    'svg': SVG_NS,
    'xlink': XLINK_NS,
}

# Id of the animation all other animations are synchronized with
CLOCK_ID = 'clock'


def _tag(name):
    return '{{{}}}{}'.format(SVG_NS, name)


def _milliseconds(seconds):
    return int(round(seconds * 1000))


class StyleSheet:
    """Mapping between styles and CSS classes

    Classes are numbered in the order in which styles are first encountered
    so that rendering the same keyframes always produces the same document.
    """
    def __init__(self, theme):
        self.theme = theme
        self._classes = {}

    def class_name(self, style):
        try:
            return self._classes[style]
        except KeyError:
            name = 's{}'.format(len(self._classes) + 1)
            self._classes[style] = name
            return name

    def _color(self, color):
        if isinstance(color, (AnsiColor, ExtendedColor)):
            return self.theme.color(color.index)
        return '#{:02x}{:02x}{:02x}'.format(*color)

    def colors(self, style):
        """Return the text color and the background color of a style

        The background color is None if it is the default background color.
        Bold text uses the bright version of the first 8 colors of the palette.
        """
        foreground = style.fg
        if (style.bold and isinstance(foreground, AnsiColor)
                and foreground.index < 8):
            foreground = AnsiColor(foreground.index + 8)

        if foreground is None:
            text_color = self.theme.foreground
        else:
            text_color = self._color(foreground)

        if style.bg is None:
            background_color = None
        else:
            background_color = self._color(style.bg)

        if style.inverse:
            if background_color is None:
                background_color = self.theme.background
            text_color, background_color = background_color, text_color

        return text_color, background_color

    def has_background(self, style):
        _, background_color = self.colors(style)
        return background_color is not None

    def to_css(self):
        rules = []
        for style, name in self._classes.items():
            text_color, background_color = self.colors(style)
            declarations = ['fill: {}'.format(text_color)]
            if style.bold:
                declarations.append('font-weight: bold')
            if style.italic:
                declarations.append('font-style: italic')
            decoration = ' '.join(value for flag, value in
                                  ((style.underline, 'underline'),
                                   (style.strikethrough, 'line-through'))
                                  if flag)
            if decoration:
                declarations.append('text-decoration: {}'.format(decoration))
            rules.append('text.{} {{ {}; }}'.format(name, '; '.join(declarations)))
            if background_color is not None:
                rules.append('rect.{} {{ fill: {}; }}'.format(name, background_color))
        return os.linesep.join(rules)


def _make_rect_tag(run, class_name, cell_width, cell_height):
    attributes = {
        'x': str(run.column * cell_width),
        'y': '0',
        'width': str(len(run.text) * cell_width),
        'height': str(cell_height),
        'class': class_name,
    }
    return etree.Element(_tag('rect'), attributes)


def _make_text_tag(run, class_name, cell_width):
    """Build SVG text element based on the content and the style of a run"""
    attributes = {
        'x': str(run.column * cell_width),
        'textLength': str(len(run.text) * cell_width),
        'class': class_name,
    }
    text_tag = etree.Element(_tag('text'), attributes)
    text_tag.text = ''.join(run.text)
    return text_tag


def _render_runs(runs, style_sheet, cell_width, cell_height):
    """Return a group element containing the runs of a row

    Rectangles are only generated for non default background colors and
    text elements are only generated for visible text.
    """
    group = etree.Element(_tag('g'))
    for run in runs:
        style = run.style
        visible_text = (''.join(run.text).strip() or style.underline
                        or style.strikethrough)
        has_background = style_sheet.has_background(style)
        if not visible_text and not has_background:
            continue

        class_name = style_sheet.class_name(style)
        if has_background:
            group.append(_make_rect_tag(run, class_name, cell_width, cell_height))
        if visible_text:
            group.append(_make_text_tag(run, class_name, cell_width))
    return group


def _row_versions(keyframes):
    """Return a mapping between row numbers and the list of (time, runs)
    tuples of the keyframes modifying the row"""
    versions = defaultdict(list)
    for keyframe in keyframes:
        for row in sorted(keyframe.rows):
            versions[row].append((keyframe.time, keyframe.rows[row]))
    return versions


def _add_visibility(tag, begin, end, loop, last):
    """Display `tag` between `begin` and `end` (milliseconds)"""
    attributes = {
        'attributeName': 'display',
        'to': 'inline',
        'begin': '{}.begin+{}ms'.format(CLOCK_ID, begin),
        'dur': '{}ms'.format(end - begin),
        'fill': 'freeze' if last and not loop else 'remove',
    }
    etree.SubElement(tag, _tag('set'), attributes)


def _add_clock(tag, duration, loop):
    attributes = {
        'id': CLOCK_ID,
        'attributeName': 'opacity',
        'from': '1',
        'to': '1',
        'begin': '0ms;{}.end'.format(CLOCK_ID) if loop else '0ms',
        'dur': '{}ms'.format(duration),
        'fill': 'remove' if loop else 'freeze',
    }
    etree.SubElement(tag, _tag('animate'), attributes)


def _css(configuration, theme, style_sheet):
    font_family = configuration.font_family.replace("'", '').replace('"', '')
    css_body = """#screen {{
            font-family: '{font_family}', monospace;
            font-style: normal;
            font-size: {font_size}px;
        }}

        text {{
            dominant-baseline: text-before-edge;
            white-space: pre;
        }}

        .background {{
            fill: {background};
        }}
""".format(font_family=font_family,
           font_size=configuration.font_size,
           background=theme.background)
    return css_body + style_sheet.to_css() + os.linesep


def render_animation(keyframes, geometry, duration, configuration, theme):
    """Return an SVG animation of the keyframes as bytes

    :param keyframes: Sequence of keyframes ordered by time, the last one
    holding until the end of the animation
    :param geometry: Tuple (columns, rows) giving the size of the screen
    :param duration: Duration of the animation in seconds
    :param configuration: Rendering options (font, cell size, looping)
    :param theme: Theme used to resolve colors
    """
    columns, rows = geometry
    cell_width = configuration.cell_width
    cell_height = configuration.cell_height
    width = columns * cell_width
    height = rows * cell_height
    # Browsers ignore animations lasting 0ms
    total_duration = max(_milliseconds(duration), 1)

    root = etree.Element(_tag('svg'), {
        'width': str(width),
        'height': str(height),
        'viewBox': '0 0 {} {}'.format(width, height),
    }, nsmap={None: SVG_NS, 'xlink': XLINK_NS})
    tree_defs = etree.SubElement(root, _tag('defs'))
    style = etree.SubElement(tree_defs, _tag('style'),
                             {'id': 'generated-style', 'type': 'text/css'})

    background = etree.SubElement(root, _tag('rect'), {
        'class': 'background',
        'height': '100%',
        'width': '100%',
        'x': '0',
        'y': '0',
    })
    _add_clock(background, total_duration, configuration.loop)

    screen = etree.SubElement(root, _tag('g'), {'id': 'screen'})
    style_sheet = StyleSheet(theme)
    definitions = {}
    hold_until = _milliseconds(keyframes[-1].hold_until) if keyframes else total_duration
    for row, versions in sorted(_row_versions(keyframes).items()):
        row_group = None
        for index, (time, runs) in enumerate(versions):
            begin = _milliseconds(time)
            last = index == len(versions) - 1
            if last:
                # The final state of the row is displayed even without trailing hold
                end = max(hold_until, begin + 1)
            else:
                end = _milliseconds(versions[index + 1][0])
                if end <= begin:
                    continue

            group = _render_runs(runs, style_sheet, cell_width, cell_height)
            if not len(group):
                continue

            # Find or create a definition for the content of the row
            group_str = etree.tostring(group)
            if group_str in definitions:
                group_id = definitions[group_str].attrib['id']
            else:
                group_id = 'g{}'.format(len(definitions) + 1)
                group.attrib['id'] = group_id
                definitions[group_str] = group
                tree_defs.append(group)

            if row_group is None:
                row_group = etree.SubElement(screen, _tag('g'), {'id': 'row{}'.format(row)})
            use_attributes = {
                '{{{}}}href'.format(XLINK_NS): '#{}'.format(group_id),
                'y': str(row * cell_height),
                'display': 'none',
            }
            use = etree.SubElement(row_group, _tag('use'), use_attributes)
            _add_visibility(use, begin, end, configuration.loop, last)

    style.text = etree.CDATA(_css(configuration, theme, style_sheet))
    return etree.tostring(root, encoding='utf-8', xml_declaration=True)
