from unittest.mock import MagicMock, patch

import github3.exceptions
import pytest

import github_client
import release_notes.config as rnc
import release_notes.model as rnm
import release_notes.pipeline as rnp
import release_notes.render as rnr

RELEASE_URL = 'https://github.com/acme/anvil/releases/tag/v1.1.0'


@pytest.fixture
def config():
    return rnc.ReleaseConfig(
        credentials=github_client.GithubCredentials(token='token'),
        owner='acme',
        repo='anvil',
        tag='v1.1.0',
        template='/templates/release.mako',
    )


@pytest.fixture
def template_cache():
    return rnr.TemplateCache(
        read_template=MagicMock(
            return_value='${previous_tag.name}..${new_tag.name}: '
            "${' '.join('#%d' % pr.number for pr in pull_requests)}",
        ),
    )


@pytest.fixture(autouse=True)
def patched_repository_helper(repository_helper):
    with patch('github_client.util.RepositoryHelper', return_value=repository_helper) as ctor:
        yield ctor


def test_create_release(config, template_cache, repository_helper, patched_repository_helper):
    github_api = MagicMock()

    assert rnp.create_release(
        config=config,
        template_cache=template_cache,
        github_api=github_api,
    ) == RELEASE_URL

    patched_repository_helper.assert_called_once_with(
        owner='acme',
        name='anvil',
        github_api=github_api,
    )
    repository_helper.compare.assert_called_once_with(base='v1.0.0', head='v1.1.0')
    repository_helper.create_release.assert_called_once_with(
        tag_name='v1.1.0',
        name='v1.1.0',
        body='v1.0.0..v1.1.0: #1',
    )


def test_create_release_preview(config, template_cache, repository_helper):
    config.preview = True

    body = rnp.create_release(
        config=config,
        template_cache=template_cache,
        github_api=MagicMock(),
    )

    assert body == 'v1.0.0..v1.1.0: #1'
    repository_helper.create_release.assert_not_called()


def test_create_release_reads_template_once(config, template_cache):
    config.preview = True

    for _ in range(2):
        rnp.create_release(
            config=config,
            template_cache=template_cache,
            github_api=MagicMock(),
        )

    template_cache._read_template.assert_called_once_with('/templates/release.mako')


def test_create_release_custom_render(config, repository_helper):
    config.template = None
    config.template_props = {'product_name': 'Anvil'}
    render = MagicMock(return_value='custom body')
    config.render = render

    rnp.create_release(
        config=config,
        github_api=MagicMock(),
    )

    view = render.call_args.args[0]
    assert view['product_name'] == 'Anvil'
    assert view['new_tag'].name == 'v1.1.0'
    assert [pr.number for pr in view['pull_requests']] == [1]
    repository_helper.create_release.assert_called_once_with(
        tag_name='v1.1.0',
        name='v1.1.0',
        body='custom body',
    )


def test_create_release_show_diff(config, repository_helper):
    config.template = None
    config.preview = True
    config.show_diff = lambda file: file.filename != 'README.md'
    config.render = lambda view: '|'.join(str(file.diff) for file in view['files'])

    body = rnp.create_release(
        config=config,
        github_api=MagicMock(),
    )

    assert body == 'None|+print(\\`hi\\`)|None'


def test_create_release_validates_before_api_access(config, repository_helper):
    config.template = '/templates/release.mako'
    config.render = lambda view: ''
    github_api = MagicMock()

    with pytest.raises(rnm.ConfigError):
        rnp.create_release(
            config=config,
            github_api=github_api,
        )

    repository_helper.tag_names.assert_not_called()
    github_api.assert_not_called()


def test_create_release_no_previous_release(config, template_cache, repository_helper):
    config.tag = 'v1.0.0'

    with pytest.raises(rnm.NoPreviousRelease):
        rnp.create_release(
            config=config,
            template_cache=template_cache,
            github_api=MagicMock(),
        )

    repository_helper.compare.assert_not_called()
    repository_helper.create_release.assert_not_called()


def test_create_release_tag_not_found(config, template_cache, repository_helper):
    config.tag = 'v3.0.0'

    with pytest.raises(rnm.TagNotFound):
        rnp.create_release(
            config=config,
            template_cache=template_cache,
            github_api=MagicMock(),
        )


def test_create_release_propagates_api_errors(config, template_cache, repository_helper):
    response = MagicMock()
    response.status_code = 422
    response.json.return_value = {'message': 'Validation Failed'}
    repository_helper.create_release.side_effect = github3.exceptions.UnprocessableEntity(
        response,
    )

    with pytest.raises(github3.exceptions.UnprocessableEntity):
        rnp.create_release(
            config=config,
            template_cache=template_cache,
            github_api=MagicMock(),
        )


def test_create_release_creates_github_api(config, template_cache):
    with patch('github_client.github_api') as github_api:
        rnp.create_release(
            config=config,
            template_cache=template_cache,
        )

    github_api.assert_called_once_with(
        credentials=config.credentials,
        api_options=None,
    )
