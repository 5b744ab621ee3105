import unittest

from termsvg.style import (DEFAULT_STYLE, AnsiColor, ExtendedColor, RGBColor, Style,
                           apply_sgr, sgr_sequence)


class TestStyle(unittest.TestCase):
    def test_apply_sgr(self):
        red_bold = Style(fg=AnsiColor(1), bold=True)
        test_cases = [
            ('empty parameters reset', red_bold, [], DEFAULT_STYLE),
            ('explicit reset', red_bold, [0], DEFAULT_STYLE),
            ('foreground', DEFAULT_STYLE, [31], Style(fg=AnsiColor(1))),
            ('bright foreground', DEFAULT_STYLE, [92], Style(fg=AnsiColor(10))),
            ('background', DEFAULT_STYLE, [44], Style(bg=AnsiColor(4))),
            ('bright background', DEFAULT_STYLE, [107], Style(bg=AnsiColor(15))),
            ('default foreground', red_bold, [39], Style(bold=True)),
            ('default background', Style(bg=AnsiColor(2)), [49], DEFAULT_STYLE),
            ('flags', DEFAULT_STYLE, [1, 3, 4, 7, 9],
             Style(bold=True, italic=True, underline=True, inverse=True,
                   strikethrough=True)),
            ('normal intensity', red_bold, [22], Style(fg=AnsiColor(1))),
            ('reset then set', red_bold, [0, 4], Style(underline=True)),
            ('256 colors', DEFAULT_STYLE, [38, 5, 208], Style(fg=ExtendedColor(208))),
            ('256 colors clamped', DEFAULT_STYLE, [48, 5, 300], Style(bg=ExtendedColor(255))),
            ('truecolor', DEFAULT_STYLE, [38, 2, 10, 20, 30],
             Style(fg=RGBColor(10, 20, 30))),
            ('truecolor followed by flag', DEFAULT_STYLE, [48, 2, 1, 2, 3, 1],
             Style(bg=RGBColor(1, 2, 3), bold=True)),
            ('truncated truecolor', red_bold, [38, 2, 10], red_bold),
            ('unknown color mode', DEFAULT_STYLE, [38, 7, 1, 4], DEFAULT_STYLE),
            ('unknown parameter', DEFAULT_STYLE, [51, 1], Style(bold=True)),
        ]
        for case, style, params, expected_style in test_cases:
            with self.subTest(case=case):
                self.assertEqual(apply_sgr(style, params), expected_style)

    def test_sgr_sequence(self):
        test_cases = [
            (DEFAULT_STYLE, '\x1b[0m'),
            (Style(fg=AnsiColor(1), bold=True), '\x1b[0;1;31m'),
            (Style(fg=AnsiColor(9), bg=AnsiColor(12)), '\x1b[0;91;104m'),
            (Style(fg=ExtendedColor(100), underline=True), '\x1b[0;4;38;5;100m'),
            (Style(bg=RGBColor(1, 2, 3), inverse=True), '\x1b[0;7;48;2;1;2;3m'),
        ]
        for style, sequence in test_cases:
            with self.subTest(case=style):
                self.assertEqual(sgr_sequence(style), sequence)

    def test_sgr_sequence_applied_to_any_style(self):
        styles = [
            DEFAULT_STYLE,
            Style(fg=AnsiColor(3), italic=True, strikethrough=True),
            Style(fg=RGBColor(255, 0, 127), bg=ExtendedColor(17), bold=True),
        ]
        for style in styles:
            with self.subTest(case=style):
                params = [int(p) for p in sgr_sequence(style)[2:-1].split(';')]
                self.assertEqual(apply_sgr(Style(bold=True, bg=AnsiColor(5)), params),
                                 style)

    def test_erased(self):
        style = Style(fg=AnsiColor(1), bg=AnsiColor(4), bold=True, underline=True)
        self.assertEqual(style.erased(), Style(bg=AnsiColor(4)))
