import os
import pathlib
import typing


DEFAULTS: typing.Mapping[str, typing.Any] = {
    'recursive': False,
    'body_template': None,
    'line_template': None,
    'src': '.',
    'dest': None,
}


class ConfigError(Exception):
    pass


def merge_options(defaults: typing.Mapping,
                  options: typing.Mapping) -> dict:
    """ overlay given options on defaults


    Options that were not given (None) keep the default.
    >>> merge_options({'src': '.', 'dest': None}, {'src': None, 'dest': 'out'})
    {'src': '.', 'dest': 'out'}

    Unknown options are rejected.
    >>> merge_options({'src': '.'}, {'verbose': True})
    Traceback (most recent call last):
        ...
    config.ConfigError: unknown option: verbose
    """

    result = dict(defaults)

    for k, v in options.items():
        if k not in defaults:
            raise ConfigError('unknown option: {}'.format(k))
        if v is not None:
            result[k] = v

    return result


def resolve(path: str) -> pathlib.Path:
    """ absolute, normalised form of `path` relative to the working directory

    >>> resolve('/srv/www/../site')
    PosixPath('/srv/site')
    """

    return pathlib.Path(os.path.abspath(path))


class Config(typing.Mapping):
    def __init__(self, options: typing.Mapping = None) -> None:
        self._config = merge_options(DEFAULTS, options or {})

        if not self._config['dest']:
            raise ConfigError('destination directory is required')

    @classmethod
    def from_args(cls, args: typing.Any) -> 'Config':
        return cls({k: getattr(args, k, None) for k in DEFAULTS})

    def __str__(self) -> str:
        return '<Config {}>'.format(self._config)

    def as_dict(self) -> dict:
        return dict(self._config)

    def __getitem__(self, key: str) -> typing.Any:
        return self._config[key]

    def __iter__(self) -> typing.Iterator:
        return iter(self._config)

    def __len__(self) -> int:
        return len(self._config)

    def source_path(self) -> pathlib.Path:
        return resolve(self._config['src'])

    def dest_path(self) -> pathlib.Path:
        return resolve(self._config['dest'])

    def check(self) -> None:
        """
        >>> Config({'src': '/srv/www', 'dest': '/srv/site'}).check()

        >>> Config({'src': '/srv/www', 'dest': '/srv'}).check()
        Traceback (most recent call last):
            ...
        config.ConfigError: the output directory cannot be a parent of the input directory
        """

        src = self.source_path()
        dest = self.dest_path()

        if dest == src or dest in src.parents:
            raise ConfigError('the output directory cannot be a parent of '
                              'the input directory')
