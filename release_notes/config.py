import collections.abc
import dataclasses
import logging
import os
import re
import typing

import dacite

import ci.util
import github_client
import release_notes.model as rnm
import release_notes.render
import release_notes.view

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (
    '.github-releaserc',
    '.github-releaserc.yaml',
    '.github-releaserc.yml',
    '.github-releaserc.json',
    'github-release.yaml',
    'github-release.yml',
)

# legacy key-names (still accepted in config-files)
_key_aliases = {
    'authenticate_options': 'credentials',
}


@dataclasses.dataclass(kw_only=True)
class ReleaseConfig:
    '''
    credentials:    used to authenticate against GitHub
    owner:          repository-owner (organisation or user)
    repo:           repository-name
    tag:            name of the (existing) tag to create release-notes for
    render:         custom render-function (receives view, returns body); exclusive w/ template
    template:       path to mako-template (defaults to built-in template)
    template_props: additional values to pass to template (may overwrite view-values)
    show_diff:      predicate deciding whether to render a file's diff (defaults to always)
    api_options:    GitHub-host / -api settings
    preview:        if set, return rendered release-notes instead of publishing a release
    max_workers:    max. amount of concurrent requests issued for retrieving pull requests
    '''
    credentials: github_client.GithubCredentials
    owner: str
    repo: str
    tag: str
    render: release_notes.render.Render | None = None
    template: str | None = None
    template_props: dict[str, typing.Any] | None = None
    show_diff: release_notes.view.ShowDiff | None = None
    api_options: github_client.ApiOptions | None = None
    preview: bool = False
    max_workers: int = 8

    def validate(self):
        for attr in ('credentials', 'owner', 'repo', 'tag'):
            if not getattr(self, attr):
                raise rnm.ConfigError(f'{attr} property is required')

        for attr, type_ in (
            ('credentials', github_client.GithubCredentials),
            ('owner', str),
            ('repo', str),
            ('tag', str),
            ('render', collections.abc.Callable),
            ('template', str),
            ('template_props', collections.abc.Mapping),
            ('show_diff', collections.abc.Callable),
            ('api_options', github_client.ApiOptions),
            ('preview', bool),
            ('max_workers', int),
        ):
            value = getattr(self, attr)
            if value is not None and not isinstance(value, type_):
                raise rnm.ConfigError(f'{attr} property must be of type {type_.__name__}')

        if not self.credentials.is_complete():
            raise rnm.ConfigError('credentials must either contain token, or username and password')

        if self.template and self.render:
            raise rnm.ConfigError('template and render properties are exclusive')

        if self.max_workers < 1:
            raise rnm.ConfigError('max_workers must be greater than zero')

        return self

    @property
    def host(self) -> str:
        if not self.api_options:
            return github_client.GITHUB_COM
        return self.api_options.host


def find_config_file(
    start_dir: str | None=None,
) -> str | None:
    '''
    looks for a config-file (see `CONFIG_FILE_NAMES`) in the given directory (defaults to
    current working directory) and its parent directories
    '''
    current_dir = os.path.abspath(start_dir or os.getcwd())

    while True:
        for name in CONFIG_FILE_NAMES:
            if os.path.isfile(path := os.path.join(current_dir, name)):
                return path

        if (parent_dir := os.path.dirname(current_dir)) == current_dir:
            return None
        current_dir = parent_dir


def _normalise_key(key: str) -> str:
    key = re.sub(r'(?<=[a-z0-9])(?=[A-Z])', '_', key).lower().replace('-', '_')
    return _key_aliases.get(key, key)


def _normalise_dict_keys(dic: dict) -> dict:
    return {_normalise_key(k): v for k, v in dic.items()}


def load_config_dict(
    path: str | None=None,
) -> dict:
    '''
    reads the config-file from the given path (or discovers it, see `find_config_file`), and
    returns its contents with normalised (snake_case) keys. A relative template-path is
    resolved relative to the config-file's directory.

    JSON-files are also accepted, as JSON is a subset of YAML.
    '''
    if not path and not (path := find_config_file()):
        raise rnm.ConfigError(
            'No config file found. Create a github-release.yaml file or specify the path to the '
            'config file using the --config option'
        )

    logger.info(f'reading config from {path}')
    raw = ci.util.parse_yaml_file(path)

    if not isinstance(raw, dict):
        raise rnm.ConfigError(f'{path} must contain a mapping')

    config = _normalise_dict_keys(raw)
    for attr in ('credentials', 'api_options'):
        if isinstance(config.get(attr), dict):
            config[attr] = _normalise_dict_keys(config[attr])

    if isinstance(template := config.get('template'), str) and not os.path.isabs(template):
        config['template'] = os.path.join(os.path.dirname(os.path.abspath(path)), template)

    return config


def release_config(
    config_dict: dict,
    tag: str,
    preview: bool=False,
) -> ReleaseConfig:
    '''
    creates a validated ReleaseConfig for the given tag from the given (normalised) config-dict,
    as returned from `load_config_dict`.

    The credentials' token falls back to env-var `GITHUB_TOKEN`. If neither owner nor repo are
    configured, they are read from the env-vars set for GitHub-Actions-runs.
    '''
    config_dict = dict(config_dict)

    for attr in ('render', 'show_diff'):
        if attr in config_dict:
            raise rnm.ConfigError(f'{attr} property is not supported in config files')

    credentials = dict(config_dict.get('credentials') or {})
    # `type` is accepted (and ignored) for legacy config-files
    credentials.pop('type', None)
    if not credentials.get('token') and (token := os.environ.get('GITHUB_TOKEN')):
        credentials['token'] = token
    config_dict['credentials'] = credentials

    if (
        not config_dict.get('owner')
        and not config_dict.get('repo')
        and 'GITHUB_REPOSITORY' in os.environ
        and 'GITHUB_SERVER_URL' in os.environ
    ):
        host, owner, repo = github_client.host_org_and_repo()
        config_dict['owner'] = owner
        config_dict['repo'] = repo
        config_dict.setdefault('api_options', {'host': host})

    config_dict['tag'] = tag
    config_dict['preview'] = preview

    try:
        config = dacite.from_dict(
            data_class=ReleaseConfig,
            data=config_dict,
            config=dacite.Config(strict=True),
        )
    except dacite.DaciteError as de:
        raise rnm.ConfigError(f'invalid config: {de}') from de

    return config.validate()
