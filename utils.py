import os
import sys
import typing


DEBUG_ENV = 'STATIK_DEBUG'
VERBOSE_MARKER = 'verbose: '


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV, '') not in ('', '0')


def debug(message: str, log: typing.TextIO = None) -> None:
    """ print a diagnostic line when STATIK_DEBUG is set

    >>> import io
    >>> os.environ[DEBUG_ENV] = '1'
    >>> out = io.StringIO()
    >>> debug('recursive=1', out)
    >>> out.getvalue()
    'verbose: recursive=1\\n'

    >>> os.environ[DEBUG_ENV] = '0'
    >>> debug('recursive=1', out)
    >>> out.getvalue()
    'verbose: recursive=1\\n'
    >>> del os.environ[DEBUG_ENV]
    """

    if debug_enabled():
        print(VERBOSE_MARKER + message,
              file=log if log is not None else sys.stderr)


def error(message: str, log: typing.TextIO = None) -> None:
    print('statik: {}'.format(message),
          file=log if log is not None else sys.stderr)
