import unittest

from termsvg import config
from termsvg.engine import Header

MINIMAL_THEME = """[test]
foreground=#aaaaaa
background=#000000
color0=#000000
color1=#111111
color2=#222222
color3=#333333
color4=#444444
color5=#555555
color6=#666666
color7=#777777
"""


class TestConfig(unittest.TestCase):
    def test_xterm_colors(self):
        self.assertEqual(len(config.XTERM_COLORS), 256)
        test_cases = [
            (1, '#cd0000'),
            (16, '#000000'),
            (21, '#0000ff'),
            (196, '#ff0000'),
            (231, '#ffffff'),
            (232, '#080808'),
            (255, '#eeeeee'),
        ]
        for index, color in test_cases:
            with self.subTest(case=index):
                self.assertEqual(config.XTERM_COLORS[index], color)

    def test_theme(self):
        failure_test_cases = [
            ('invalid foreground', None, '#000000', ['#000000'] * 8),
            ('invalid hex number', '#BCDEFG', '#000000', ['#000000'] * 8),
            ('invalid background', '#000000', 'black', ['#000000'] * 8),
            ('palette too short', '#000000', '#000000', ['#000000'] * 7),
            ('palette too long', '#000000', '#000000', ['#000000'] * 257),
            ('invalid palette color', '#000000', '#000000', ['#000000'] * 7 + ['red']),
        ]
        for case, foreground, background, palette in failure_test_cases:
            with self.subTest(case=case):
                with self.assertRaises(config.ConfigError):
                    config.Theme(foreground, background, palette)

    def test_theme_color(self):
        palette = ['#00000{}'.format(i) for i in range(8)]
        test_cases = [
            ('8 colors', palette, 3, '#000003'),
            ('bright color from 8 colors', palette, 11, '#000003'),
            ('16 colors', palette + ['#ffffff'] * 8, 11, '#ffffff'),
            ('xterm color', palette, 196, '#ff0000'),
        ]
        for case, colors, index, color in test_cases:
            with self.subTest(case=case):
                self.assertEqual(config.Theme('#ffffff', '#000000', colors).color(index), color)

    def test_conf_to_themes(self):
        themes = config.conf_to_themes(MINIMAL_THEME)
        self.assertEqual(list(themes), ['test'])
        self.assertEqual(themes['test'].foreground, '#aaaaaa')
        self.assertEqual(len(themes['test'].palette), 8)

        failure_test_cases = [
            ('missing section', 'foreground=#000000'),
            ('missing foreground', MINIMAL_THEME.replace('foreground=#aaaaaa\n', '')),
            ('invalid color', MINIMAL_THEME.replace('#555555', '#55555')),
        ]
        for case, configuration in failure_test_cases:
            with self.subTest(case=case):
                with self.assertRaises(config.ConfigError):
                    config.conf_to_themes(configuration)

    def test_default_themes(self):
        themes = config.default_themes()
        self.assertIn(config.DEFAULT_THEME, themes)
        for name in ['xterm', 'solarized_dark', 'solarized_light', 'dracula',
                     'base16_default_dark']:
            with self.subTest(case=name):
                self.assertEqual(len(themes[name].palette), 16)

    def test_validate_configuration(self):
        valid_test_cases = [
            config.Configuration(),
            config.Configuration(theme='XTERM', max_idle=0.5, coalesce_threshold=0),
            config.Configuration(theme=config.Theme('#000000', '#ffffff', ['#000000'] * 8)),
        ]
        for configuration in valid_test_cases:
            with self.subTest(case=configuration):
                self.assertEqual(config.validate_configuration(configuration), configuration)

        failure_test_cases = [
            ('speed', config.Configuration(speed_factor=-1)),
            ('speed type', config.Configuration(speed_factor='fast')),
            ('max idle', config.Configuration(max_idle=0)),
            ('cell width', config.Configuration(cell_width=0)),
            ('font family', config.Configuration(font_family='')),
            ('theme name', config.Configuration(theme='missing')),
            ('theme type', config.Configuration(theme=42)),
        ]
        for case, configuration in failure_test_cases:
            with self.subTest(case=case):
                with self.assertRaises(config.ConfigError):
                    config.validate_configuration(configuration)

    def test_validate_configuration_zero_durations(self):
        configuration = config.Configuration(coalesce_threshold=0, trailing_hold=0)
        self.assertEqual(config.validate_configuration(configuration), configuration)
        for name in ('coalesce_threshold', 'trailing_hold'):
            with self.subTest(case=name):
                with self.assertRaisesRegex(config.ConfigError, 'must not be negative'):
                    config.validate_configuration(config.Configuration(**{name: -0.5}))

    def test_validate_header(self):
        failure_test_cases = [
            Header(0, 1),
            Header(1, -1),
            Header(True, 1),
            Header('1', 1),
            Header(1, 1, theme='xterm'),
        ]
        for header in failure_test_cases:
            with self.subTest(case=header):
                with self.assertRaises(config.ConfigError):
                    config.validate_header(header)
        self.assertEqual(config.validate_header(Header(24, 80)), Header(24, 80))

    def test_resolve_theme(self):
        themes = config.default_themes()
        custom_theme = config.Theme('#000000', '#ffffff', ['#000000'] * 8)
        test_cases = [
            (None, None, themes['xterm']),
            (None, custom_theme, custom_theme),
            ('Solarized_Dark', custom_theme, themes['solarized_dark']),
            (custom_theme, None, custom_theme),
        ]
        for configuration_theme, header_theme, theme in test_cases:
            with self.subTest(case=configuration_theme):
                configuration = config.Configuration(theme=configuration_theme)
                header = Header(1, 1, theme=header_theme)
                self.assertEqual(config.resolve_theme(configuration, header, themes), theme)
