import collections.abc
import concurrent.futures
import logging
import re

import github3.exceptions

import github_client.util
import release_notes.model as rnm
import version

logger = logging.getLogger(__name__)

# squash-merges done by GitHub append the pull-request-number to the commit-subject
pull_request_reference_pattern = re.compile(r'\(#([0-9]+)\)')


def resolve_tags(
    repository_helper: github_client.util.RepositoryHelper,
    tag: str,
) -> tuple[str, str]:
    '''
    returns a two-tuple of the given tag, and its predecessor w.r.t. version-order among all
    tags of the repository.

    raises `TagNotFound` if there is no such tag, and `NoPreviousRelease` if the tag is the
    smallest one.
    '''
    tags = version.sort_versions(repository_helper.tag_names())

    try:
        idx = tags.index(tag)
    except ValueError:
        raise rnm.TagNotFound(tag)

    if idx == 0:
        raise rnm.NoPreviousRelease(tag)

    previous_tag = tags[idx - 1]
    logger.info(f'{previous_tag=} is the predecessor of {tag=}')

    return tag, previous_tag


def _commit(commit: dict) -> rnm.Commit:
    return rnm.Commit(
        id=commit['sha'][:7],
        url=commit['html_url'],
        author=rnm.Author.from_user(commit.get('author')),
        date=rnm.parse_timestamp(commit['commit']['committer']['date']),
        message=commit['commit']['message'],
    )


def _file_change(file: dict) -> rnm.FileChange:
    return rnm.FileChange(
        filename=file['filename'],
        url=file['blob_url'],
        status=file['status'],
        changes=file['changes'],
        # binary files, and too large diffs have no patch
        diff=file.get('patch') or None,
    )


def fetch_diff(
    repository_helper: github_client.util.RepositoryHelper,
    new_tag: str,
    previous_tag: str,
) -> rnm.Diff:
    comparison = repository_helper.compare(
        base=previous_tag,
        head=new_tag,
    )

    diff = rnm.Diff(
        compare_url=comparison['html_url'],
        commits=tuple(_commit(commit) for commit in comparison['commits']),
        files=tuple(_file_change(file) for file in comparison.get('files', ())),
    )
    logger.info(
        f'found {len(diff.commits)} commit(s) and {len(diff.files)} changed file(s) '
        f'between {previous_tag} and {new_tag}'
    )

    return diff


def pull_request_number(message: str) -> int | None:
    if not (match := pull_request_reference_pattern.search(message)):
        return None
    return int(match.group(1))


def _comment(comment: dict) -> rnm.Comment:
    return rnm.Comment(
        url=comment['html_url'],
        body=comment['body'],
        author=rnm.Author.from_user(comment.get('user')),
        date=rnm.parse_timestamp(comment['created_at']),
    )


def _merged_pull_request(
    number: int,
    pull_request_future: concurrent.futures.Future,
    comments_future: concurrent.futures.Future,
) -> rnm.PullRequest | None:
    try:
        pull_request = pull_request_future.result()
        comments = comments_future.result()
    except github3.exceptions.NotFoundError:
        pull_request = None

    if not pull_request:
        # e.g. deleted, or number actually refers to an issue
        logger.debug(f'ignoring non-existing pull request #{number}')
        return None

    if not pull_request['merged']:
        logger.debug(f'ignoring unmerged pull request #{number}')
        return None

    return rnm.PullRequest(
        url=pull_request['html_url'],
        number=pull_request['number'],
        title=pull_request['title'],
        body=pull_request['body'],
        author=rnm.Author.from_user(pull_request.get('user')),
        date=rnm.parse_timestamp(pull_request['merged_at']),
        comments=tuple(_comment(comment) for comment in comments),
    )


def fetch_pull_requests(
    repository_helper: github_client.util.RepositoryHelper,
    commits: collections.abc.Iterable[rnm.Commit],
    max_workers: int=8,
) -> tuple[rnm.PullRequest, ...]:
    '''
    returns the merged pull requests referenced from the given commits' messages, in the order
    of the referencing commits. Each pull request's metadata and comments are retrieved
    concurrently.

    Pull requests that do not exist are silently ignored. Any other error is re-raised (the first
    one to occur); requests already issued at that time are not awaited.

    Pull requests referenced by multiple commits are returned multiple times.
    '''
    numbers = [
        number for commit in commits
        if (number := pull_request_number(commit.message)) is not None
    ]
    if not numbers:
        logger.info('no pull request references found')
        return ()

    logger.info(f'fetching {len(numbers)} pull request(s)')

    pool = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers)
    try:
        futures = [
            (
                number,
                pool.submit(repository_helper.pull_request, number),
                pool.submit(repository_helper.issue_comments, number),
            ) for number in numbers
        ]

        for future in concurrent.futures.as_completed(
            future for _, *pair in futures for future in pair
        ):
            if (
                (exception := future.exception())
                and not isinstance(exception, github3.exceptions.NotFoundError)
            ):
                raise exception
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    pull_requests = tuple(
        pull_request for number, pull_request_future, comments_future in futures
        if (pull_request := _merged_pull_request(number, pull_request_future, comments_future))
    )
    logger.info(f'found {len(pull_requests)} merged pull request(s)')

    return pull_requests
