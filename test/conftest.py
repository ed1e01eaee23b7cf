from unittest.mock import MagicMock

import pytest

import github_client.util

OWNER = 'acme'
REPO = 'anvil'
RELEASE_URL = f'https://github.com/{OWNER}/{REPO}/releases/tag/v1.1.0'


def user_doc(login: str='octocat', avatar_url: str=None):
    return {
        'login': login,
        'html_url': f'https://github.com/{login}',
        'avatar_url': avatar_url or f'https://avatars.githubusercontent.com/u/{len(login)}?v=4',
    }


@pytest.fixture
def commit_doc():
    def commit_doc(
        sha: str,
        message: str,
        author: dict | None=user_doc(),
        date: str='2024-03-01T10:00:00Z',
    ):
        return {
            'sha': sha,
            'html_url': f'https://github.com/{OWNER}/{REPO}/commit/{sha}',
            'author': author,
            'commit': {
                'message': message,
                'committer': {'name': 'GitHub', 'date': date},
            },
        }
    return commit_doc


@pytest.fixture
def file_doc():
    def file_doc(
        filename: str,
        status: str='modified',
        patch: str | None='@@ -1 +1 @@\n-old\n+new',
        changes: int=2,
    ):
        doc = {
            'filename': filename,
            'blob_url': f'https://github.com/{OWNER}/{REPO}/blob/abc/{filename}',
            'status': status,
            'changes': changes,
        }
        if patch is not None:
            doc['patch'] = patch
        return doc
    return file_doc


@pytest.fixture
def pull_request_doc():
    def pull_request_doc(
        number: int,
        merged: bool=True,
        title: str=None,
    ):
        return {
            'html_url': f'https://github.com/{OWNER}/{REPO}/pull/{number}',
            'number': number,
            'title': title or f'pull request {number}',
            'body': f'body of {number}',
            'user': user_doc('contributor'),
            'merged': merged,
            'merged_at': '2024-03-01T09:00:00Z' if merged else None,
        }
    return pull_request_doc


@pytest.fixture
def comment_doc():
    def comment_doc(
        number: int,
        body: str='LGTM',
        login: str='reviewer',
    ):
        return {
            'html_url': f'https://github.com/{OWNER}/{REPO}/pull/{number}#issuecomment-1',
            'body': body,
            'user': user_doc(login),
            'created_at': '2024-02-28T12:30:00Z',
        }
    return comment_doc


@pytest.fixture
def repository_helper(commit_doc, file_doc, pull_request_doc, comment_doc):
    '''
    repository w/ tags v1.0.0 and v1.1.0; the commits between reference pull requests #1 (merged)
    and #2 (not merged)
    '''
    helper = MagicMock(spec=github_client.util.RepositoryHelper)
    helper.tag_names.return_value = ['v1.1.0', 'v1.0.0']
    helper.compare.return_value = {
        'html_url': f'https://github.com/{OWNER}/{REPO}/compare/v1.0.0...v1.1.0',
        'commits': [
            commit_doc('a' * 40, 'add feature (#1)\n\nsome details'),
            commit_doc('b' * 40, 'wip (#2)'),
            commit_doc('c' * 40, 'direct push', author=None),
        ],
        'files': [
            file_doc('README.md'),
            file_doc('new.py', status='added', patch='+print(`hi`)'),
            file_doc('logo.png', status='removed', patch=None),
        ],
    }
    helper.pull_request.side_effect = lambda number: pull_request_doc(number, merged=number != 2)
    helper.issue_comments.side_effect = lambda number: [comment_doc(number)]
    helper.create_release.return_value = RELEASE_URL

    return helper
