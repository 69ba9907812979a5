import re
import typing

import markupsafe

import config
import loader


DEFAULT_BODY = ('<html lang="en"><head><title>%s</title></head>'
                '<body>%s</body></html>')
DEFAULT_LINE = '<li><a href="%s">%s</a></li>'

SUBSTITUTION_POINTS = 2

_DIRECTIVE = re.compile(r'%(.?)', re.DOTALL)


class TemplateError(Exception):
    pass


def substitution_points(source: str) -> int:
    """ count the `%s` points of a template

    >>> substitution_points('<li><a href="%s">%s</a></li>')
    2

    `%%` is a literal percent sign.
    >>> substitution_points('<p style="width: 100%%">%s</p>')
    1

    Other directives are not supported.
    >>> substitution_points('<p>%d</p>')
    Traceback (most recent call last):
        ...
    template.TemplateError: unsupported directive '%d'
    """

    count = 0

    for match in _DIRECTIVE.finditer(source):
        directive = match.group(1)
        if directive == '%':
            continue
        if directive != 's':
            raise TemplateError(
                'unsupported directive {!r}'.format(match.group(0)))
        count += 1

    return count


class Template:
    """
    >>> Template('<li><a href="%s">%s</a></li>').render('a.html', 'A & B')
    '<li><a href="a.html">A &amp; B</a></li>'

    >>> Template('<p>%s</p>')
    Traceback (most recent call last):
        ...
    template.TemplateError: <string>: expected 2 substitution points, found 1
    """

    def __init__(self, source: str, name: str = '<string>') -> None:
        try:
            found = substitution_points(source)
        except TemplateError as e:
            raise TemplateError('{}: {}'.format(name, e)) from e

        if found != SUBSTITUTION_POINTS:
            raise TemplateError(
                '{}: expected {} substitution points, found {}'.format(
                    name, SUBSTITUTION_POINTS, found))

        self.source = source
        self.name = name

    def __str__(self) -> str:
        return '<template.Template {}>'.format(self.name)

    def render(self, first: typing.Any, second: typing.Any) -> str:
        return str(markupsafe.Markup(self.source) % (first, second))


class Templates:
    def __init__(self,
                 body: Template = None,
                 line: Template = None) -> None:

        self.body = body if body is not None else Template(DEFAULT_BODY)
        self.line = line if line is not None else Template(DEFAULT_LINE)

    @classmethod
    def from_config(cls, conf: config.Config) -> 'Templates':
        return cls(_load_template(conf['body_template']),
                   _load_template(conf['line_template']))

    def render_body(self, title: typing.Any, body: typing.Any) -> str:
        return self.body.render(title, markupsafe.Markup(body))

    def render_line(self, href: typing.Any, label: typing.Any) -> str:
        return self.line.render(href, label)


def _load_template(path: typing.Optional[str]) -> typing.Optional[Template]:
    if path is None:
        return None

    return Template(loader.load_text(path), path)
