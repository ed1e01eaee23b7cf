'''
utils wrapping github3.py's release-API
'''

import logging

import github_client.limits
import github_client.util

logger = logging.getLogger(__name__)


def body_or_replacement(
    body: str,
    replacement: str='body was too large (limit: {limit} / actual: {actual})',
    limit: int=github_client.limits.release_body,
) -> tuple[str, bool]:
    '''
    convenience function that will check whether given body is short enough to be accepted
    by GitHub's API. If so, passed body will be returned as first element of returned tuple, else
    replacement value.

    The second value of returned tuple will indicate whether original body was returned.
    '''
    if github_client.limits.fits(
        body,
        limit=limit,
    ):
        return body, True

    return replacement.format(
        limit=limit,
        actual=len(body),
    ), False


def publish_release(
    repository_helper: github_client.util.RepositoryHelper,
    tag_name: str,
    body: str,
) -> str:
    '''
    creates a release named as the given tag, and returns the release's html-url.

    There is no check for existing releases: whether creating a second release for the same
    tag fails is up to GitHub.
    '''
    body, is_original = body_or_replacement(body)
    if not is_original:
        logger.warning(f'release-notes for {tag_name} exceed the release-body limit - replacing')

    logger.info(f'creating release {tag_name}')
    return repository_helper.create_release(
        tag_name=tag_name,
        name=tag_name,
        body=body,
    )
