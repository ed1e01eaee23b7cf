import collections.abc
import functools
import logging
import os
import threading

import mako.template

import release_notes.model as rnm

logger = logging.getLogger(__name__)

own_dir = os.path.abspath(os.path.dirname(__file__))
DEFAULT_TEMPLATE = os.path.join(own_dir, 'templates', 'default.md.mako')

Render = collections.abc.Callable[[rnm.View], str]

'''
workaround bug in mako use lock to sequentialise invocations of mako.template.Template
see: https://github.com/sqlalchemy/mako/issues/378
'''
template_lock = threading.Lock()


def _read_file(path: str) -> str:
    with open(path, encoding='utf-8') as f:
        return f.read()


class TemplateCache:
    '''
    maps template-paths to template-contents. Each template is read at most once (upon first
    lookup); entries are never invalidated. Intended to be instantiated once per process, and
    shared between (concurrent) release-note-creations.
    '''
    def __init__(
        self,
        read_template: collections.abc.Callable[[str], str]=_read_file,
    ):
        self._read_template = read_template
        self._templates: dict[str, str] = {}
        self._lock = threading.Lock()

    def template(self, path: str) -> str:
        with self._lock:
            if (template := self._templates.get(path)) is None:
                logger.info(f'reading template from {path}')
                template = self._read_template(path)
                self._templates[path] = template
            return template

    def __contains__(self, path: str) -> bool:
        return path in self._templates


def render_template(
    template: str,
    view: rnm.View,
) -> str:
    with template_lock:
        return mako.template.Template(template).render(**view)


def renderer(
    template_cache: TemplateCache,
    render: Render | None=None,
    template_path: str | None=None,
) -> Render:
    '''
    returns `render` if given, else a function rendering the template found at `template_path`
    (defaults to `DEFAULT_TEMPLATE`)
    '''
    if render:
        return render

    template = template_cache.template(template_path or DEFAULT_TEMPLATE)

    return functools.partial(render_template, template)
