import collections.abc
import dataclasses
import datetime
import re
import types
import typing

import ci.util
import github_client
import release_notes.model as rnm

ICON_ADDED = ':heavy_plus_sign:'
ICON_REMOVED = ':heavy_minus_sign:'

AVATAR_SIZE = 20

_line_terminators = re.compile(r'[\r\n]+')

ShowDiff = collections.abc.Callable[[rnm.FileChange], bool]


def icon(status: str) -> str:
    return {
        'added': ICON_ADDED,
        'modified': '',
        'removed': ICON_REMOVED,
    }.get(status, '')


def formatted_date(date: datetime.datetime) -> str:
    '''
    renders the date-part (in UTC) using the current locale's representation
    '''
    return date.astimezone(datetime.timezone.utc).strftime('%x')


def avatar_url(author: rnm.Author) -> str:
    avatar = author.avatar
    sep = '&' if '?' in avatar else '?'
    return f'{avatar}{sep}size={AVATAR_SIZE}'


def tag_url(
    host: str,
    owner: str,
    repo: str,
    tag: str,
) -> str:
    return ci.util.urljoin(f'https://{host}', owner, repo, 'tree', tag)


def _commit(commit: rnm.Commit) -> rnm.Commit:
    return dataclasses.replace(
        commit,
        message=_line_terminators.sub('<br>', commit.message),
    )


def _pull_request(pull_request: rnm.PullRequest) -> rnm.PullRequest:
    return dataclasses.replace(
        pull_request,
        comments=tuple(
            dataclasses.replace(
                comment,
                body=_line_terminators.sub('<br>', comment.body or ''),
            ) for comment in pull_request.comments
        ),
    )


def _file_change(file: rnm.FileChange, show_diff: ShowDiff) -> rnm.FileChange:
    if not file.diff or not show_diff(file):
        diff = None
    else:
        diff = file.diff.replace('`', '\\`')

    return dataclasses.replace(
        file,
        diff=diff,
    )


def build_view(
    owner: str,
    repo: str,
    new_tag: str,
    previous_tag: str,
    diff: rnm.Diff,
    pull_requests: collections.abc.Iterable[rnm.PullRequest],
    show_diff: ShowDiff | None=None,
    template_props: dict[str, typing.Any] | None=None,
    host: str=github_client.GITHUB_COM,
) -> rnm.View:
    '''
    returns the (read-only) rendering-context for release-notes.

    Besides the data, the view contains the helper functions `icon`, `formatted_date`, and
    `avatar_url`, which are to be called by templates with the item to format (e.g. a
    file-change's status).

    `show_diff` decides whether the diff of a file-change is to be rendered (defaults to all).
    Line-breaks in commit-messages and pull-request-comments are replaced by `<br>`, so they
    fit into a single list-item.
    `template_props` are added last, and thus may overwrite any other value.
    '''
    if not show_diff:
        show_diff = lambda file: True

    view = {
        'compare_url': diff.compare_url,
        'new_tag': rnm.Tag(
            name=new_tag,
            url=tag_url(host=host, owner=owner, repo=repo, tag=new_tag),
        ),
        'previous_tag': rnm.Tag(
            name=previous_tag,
            url=tag_url(host=host, owner=owner, repo=repo, tag=previous_tag),
        ),
        'commits': tuple(_commit(commit) for commit in diff.commits),
        'files': tuple(_file_change(file, show_diff=show_diff) for file in diff.files),
        'pull_requests': tuple(_pull_request(pull_request) for pull_request in pull_requests),
        'icon': icon,
        'formatted_date': formatted_date,
        'avatar_url': avatar_url,
        **(template_props or {}),
    }

    return types.MappingProxyType(view)
