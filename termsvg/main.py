"""Command line interface of termsvg"""
import argparse
import logging
import sys
import tempfile

import termsvg.asciicast as asciicast
import termsvg.config as config
import termsvg.engine as engine

logger = logging.getLogger('termsvg')

USAGE = "termsvg render input_file [output_file] [OPTIONS] [-h]"
RENDER_USAGE = """termsvg render input_file [output_file] [--font FONT] [--font-size SIZE]
                 [--theme THEME] [--speed FACTOR] [--no-loop] [--coalesce DURATION]
                 [--hold DURATION] [--max-idle DURATION] [--verbose] [--help]"""
EPILOG = "See also 'termsvg render --help'"


def integral_duration_validation(duration):
    """Return a duration given in milliseconds (with or without the 'ms'
    suffix) in seconds"""
    if duration.lower().endswith('ms'):
        duration = duration[:-len('ms')]

    if duration.isdigit():
        return int(duration) / 1000
    raise argparse.ArgumentTypeError('duration must be a positive integer')


def speed_validation(speed):
    try:
        value = float(speed)
    except ValueError as exc:
        raise argparse.ArgumentTypeError('invalid speed factor: {}'.format(speed)) from exc
    if value <= 0:
        raise argparse.ArgumentTypeError('speed factor must be greater than 0')
    return value


def positive_integer_validation(value):
    if value.isdigit() and int(value) >= 1:
        return int(value)
    raise argparse.ArgumentTypeError('value must be an integer greater than 0')


def parse(args, themes):
    """Parse command line arguments

    :param args: Arguments to parse
    :param themes: Names of the available themes
    :return: Tuple made of the subcommand called and all parsed arguments
    """
    parser = argparse.ArgumentParser(prog='termsvg', usage=USAGE, epilog=EPILOG)
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True
    render_parser = subparsers.add_parser(
        'render',
        description='render an asciicast recording as an SVG animation',
        help='render an asciicast recording as an SVG animation',
        usage=RENDER_USAGE
    )
    render_parser.add_argument(
        'input_file',
        help='recording of a terminal session in asciicast v1 or v2 format'
    )
    render_parser.add_argument(
        'output_file',
        nargs='?',
        help='optional filename for the SVG animation; if missing, a random filename will '
        'be automatically generated',
    )
    render_parser.add_argument(
        '--font',
        help="font to specify in the CSS portion of the SVG animation (DejaVu Sans Mono, "
             "Monaco...). If the font is not installed on the viewer's machine, the browser will"
             " display a default monospaced font instead.",
        metavar='FONT'
    )
    render_parser.add_argument(
        '--font-size',
        help='font size in pixels',
        type=positive_integer_validation,
        metavar='SIZE'
    )
    render_parser.add_argument(
        '--theme',
        help=('color theme used to render the terminal session ({}). By default the '
              'theme of the recording is used if it has one.').format(', '.join(themes)),
        type=str.lower,
        choices=themes,
        metavar='THEME'
    )
    render_parser.add_argument(
        '--speed',
        help='playback speed of the animation (2 is twice as fast as the recording)',
        type=speed_validation,
        default=1.0,
        metavar='FACTOR'
    )
    render_parser.add_argument(
        '--no-loop',
        help='play the animation only once',
        action='store_true'
    )
    render_parser.add_argument(
        '--coalesce',
        help='minimum duration of a frame in milliseconds (default: {}ms)'.format(
            int(config.Configuration().coalesce_threshold * 1000)),
        type=integral_duration_validation,
        metavar='DURATION'
    )
    render_parser.add_argument(
        '--hold',
        help='duration in milliseconds of the last frame (default: {}ms)'.format(
            int(config.Configuration().trailing_hold * 1000)),
        type=integral_duration_validation,
        metavar='DURATION'
    )
    render_parser.add_argument(
        '--max-idle',
        help='maximum duration in milliseconds between two events of the recording '
             '(default: idle time limit of the recording if any)',
        type=integral_duration_validation,
        metavar='DURATION'
    )
    render_parser.add_argument(
        '-v',
        '--verbose',
        action='store_true',
        help='increase log messages verbosity'
    )

    parsed_args = parser.parse_args(args)
    return parsed_args.command, parsed_args


def build_configuration(args):
    """Return the configuration matching the command line arguments"""
    options = {
        'theme': args.theme,
        'loop': not args.no_loop,
        'speed_factor': args.speed,
    }
    if args.font is not None:
        options['font_family'] = args.font
    if args.font_size is not None:
        options['font_size'] = args.font_size
    if args.coalesce is not None:
        options['coalesce_threshold'] = args.coalesce
    if args.hold is not None:
        options['trailing_hold'] = args.hold
    if args.max_idle is not None:
        if args.max_idle <= 0:
            raise config.ConfigError('Maximum idle time must be greater than 0')
        options['max_idle'] = args.max_idle
    return config.Configuration(**options)


def render(args):
    """Convert the recording given on the command line, return the name of
    the SVG file"""
    if args.output_file is None:
        _, svg_filename = tempfile.mkstemp(prefix='termsvg_', suffix='.svg')
    else:
        svg_filename = args.output_file

    configuration = build_configuration(args)
    header, events = asciicast.read_recording(args.input_file)
    diagnostics = []
    svg = engine.convert(header, events, configuration,
                         diagnostics=diagnostics,
                         logger=logging.getLogger('termsvg.engine'))
    with open(svg_filename, 'wb') as svg_file:
        svg_file.write(svg)

    if diagnostics:
        logger.info('{} events or escape sequences were ignored'.format(len(diagnostics)))
    return svg_filename


def main(args=None):
    if args is None:
        args = sys.argv

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter('%(message)s')
    console_handler.setFormatter(console_formatter)
    logger.handlers = [console_handler]
    logger.setLevel(logging.INFO)

    themes = sorted(config.default_themes())
    command, args = parse(args[1:], themes)

    if args.verbose:
        _, log_filename = tempfile.mkstemp(prefix='termsvg_', suffix='.log')
        file_handler = logging.FileHandler(filename=log_filename, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)
        logger.handlers.append(file_handler)
        logger.setLevel(logging.DEBUG)
        logger.info('Logging to {}'.format(log_filename))

    status = 0
    if command == 'render':
        logger.info('Rendering started')
        try:
            svg_filename = render(args)
        except (asciicast.AsciiCastError, config.ConfigError, OSError) as exc:
            logger.error('Rendering failed: {}'.format(exc))
            status = 1
        else:
            logger.info('Rendering ended, SVG animation is {}'.format(svg_filename))

    for handler in logger.handlers:
        handler.close()

    return status
