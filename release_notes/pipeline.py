import logging

import github3

import github_client
import github_client.release
import github_client.util
import release_notes.config
import release_notes.fetch
import release_notes.render
import release_notes.view

logger = logging.getLogger(__name__)


def create_release(
    config: release_notes.config.ReleaseConfig,
    template_cache: release_notes.render.TemplateCache | None=None,
    github_api: github3.GitHub | None=None,
) -> str:
    '''
    creates release-notes for the tag specified in the given config, covering all changes since
    the previous tag (w.r.t. version-order), and publishes them as a GitHub-release.

    returns the release's url, or (if `config.preview` is set) the rendered release-notes w/o
    publishing them.

    `template_cache` should be shared between invocations (a new one is created if absent).
    `github_api` may be passed to overwrite api-creation from configured credentials.

    raises `release_notes.model.NoPreviousRelease` if there is no previous tag.
    '''
    config.validate()

    if template_cache is None:
        template_cache = release_notes.render.TemplateCache()

    render = release_notes.render.renderer(
        template_cache=template_cache,
        render=config.render,
        template_path=config.template,
    )

    if not github_api:
        github_api = github_client.github_api(
            credentials=config.credentials,
            api_options=config.api_options,
        )
    repository_helper = github_client.util.RepositoryHelper(
        owner=config.owner,
        name=config.repo,
        github_api=github_api,
    )

    new_tag, previous_tag = release_notes.fetch.resolve_tags(
        repository_helper=repository_helper,
        tag=config.tag,
    )
    diff = release_notes.fetch.fetch_diff(
        repository_helper=repository_helper,
        new_tag=new_tag,
        previous_tag=previous_tag,
    )
    pull_requests = release_notes.fetch.fetch_pull_requests(
        repository_helper=repository_helper,
        commits=diff.commits,
        max_workers=config.max_workers,
    )

    view = release_notes.view.build_view(
        owner=config.owner,
        repo=config.repo,
        new_tag=new_tag,
        previous_tag=previous_tag,
        diff=diff,
        pull_requests=pull_requests,
        show_diff=config.show_diff,
        template_props=config.template_props,
        host=config.host,
    )
    body = render(view)

    if config.preview:
        return body

    return github_client.release.publish_release(
        repository_helper=repository_helper,
        tag_name=new_tag,
        body=body,
    )
