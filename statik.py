import argparse
import sys
import typing

import config
import loader
import template
import utils


VERSION = 1

USAGE = '%(prog)s [-r] [-b body_template] [-l line_template] [-v] [-h] [src] dest'


class UsageError(Exception):
    pass


# option strings that end the run as soon as they are seen
EXITING_FLAGS = {'-h', '--help', '-v', '--version'}
VALUE_FLAGS = {'-b', '--body', '-l', '--line'}
KNOWN_FLAGS = EXITING_FLAGS | VALUE_FLAGS | {'-r', '--recursive'}


class ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> typing.NoReturn:
        raise UsageError(message)


def make_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='statik',
                            usage=USAGE,
                            allow_abbrev=False,
                            description='Static site generator.')

    parser.add_argument('-r',
                        '--recursive',
                        action='store_true',
                        help='Descend into subdirectories of the source.')

    parser.add_argument('-b',
                        '--body',
                        dest='body_template',
                        metavar='body_template',
                        help='HTML body template, replaces the default one.')

    parser.add_argument('-l',
                        '--line',
                        dest='line_template',
                        metavar='line_template',
                        help='Per entry line template, replaces the default '
                             'one.')

    parser.add_argument('-v',
                        '--version',
                        action='version',
                        version='version: {}'.format(VERSION))

    parser.add_argument('paths',
                        metavar='path',
                        nargs='*',
                        help='The source directory (default: ./) and the '
                             'destination directory.')

    return parser


def check_flags(argv: typing.Sequence[str]) -> None:
    """ reject unknown flags in command line order

    A flag is judged before anything after it, so an unknown flag in front
    of -v or -h is an error.
    >>> check_flags(['-x', '-v', 'site'])
    Traceback (most recent call last):
        ...
    statik.UsageError: unknown flag: -x

    >>> check_flags(['-v', '-x'])
    >>> check_flags(['-l', 'line.html', '-rb', 'body.html', '--', '-x'])
    """

    args = iter(argv)

    for arg in args:
        if arg == '--':
            return
        if not arg.startswith('-') or arg == '-':
            continue

        if arg.startswith('--'):
            name, _, value = arg.partition('=')
            if name not in KNOWN_FLAGS:
                raise UsageError('unknown flag: {}'.format(name))
            if name in EXITING_FLAGS:
                return
            if name in VALUE_FLAGS and not value:
                next(args, None)
            continue

        # clustered short flags, -rv or -bbody.html
        for i, letter in enumerate(arg[1:], 2):
            flag = '-' + letter
            if flag not in KNOWN_FLAGS:
                raise UsageError('unknown flag: {}'.format(flag))
            if flag in EXITING_FLAGS:
                return
            if flag in VALUE_FLAGS:
                if i == len(arg):
                    next(args, None)
                break


def parse_args(argv: typing.Sequence[str] = None,
               parser: ArgumentParser = None) -> config.Config:
    """ parse the command line into a Config

    >>> conf = parse_args(['-r', '-b', 'body.html', 'site'])
    >>> conf['recursive'], conf['body_template'], conf['src'], conf['dest']
    (True, 'body.html', '.', 'site')

    >>> parse_args(['a', 'b', 'c'])
    Traceback (most recent call last):
        ...
    statik.UsageError: wrong amount of arguments
    """

    if parser is None:
        parser = make_parser()

    if argv is None:
        argv = sys.argv[1:]

    check_flags(argv)
    args = parser.parse_intermixed_args(argv)

    if not 1 <= len(args.paths) <= 2:
        raise UsageError('wrong amount of arguments')

    args.dest = args.paths[-1]
    if len(args.paths) == 2:
        args.src = args.paths[0]

    return config.Config.from_args(args)


def report(conf: config.Config,
           templates: template.Templates,
           log: typing.TextIO = None) -> None:

    utils.debug('recursive={:d}'.format(conf['recursive']), log)
    utils.debug('body_template={}'.format(conf['body_template']), log)
    utils.debug('line_template={}'.format(conf['line_template']), log)
    utils.debug('src={}, dest={}'.format(conf.source_path(),
                                         conf.dest_path()), log)

    for t in (templates.body, templates.line):
        utils.debug('{}: {} bytes'.format(t.name, len(t.source)), log)


def main(argv: typing.Sequence[str] = None,
         out: typing.TextIO = None,
         log: typing.TextIO = None) -> int:

    if out is None:
        out = sys.stdout

    parser = make_parser()

    try:
        conf = parse_args(argv, parser)
        conf.check()
    except (UsageError, config.ConfigError) as e:
        print('error: {}'.format(e), file=out)
        parser.print_usage(out)
        return 1

    try:
        templates = template.Templates.from_config(conf)
    except (loader.LoadError, template.TemplateError) as e:
        utils.error(str(e), log)
        return 1

    report(conf, templates, log)

    return 0


if __name__ == '__main__':
    sys.exit(main())
