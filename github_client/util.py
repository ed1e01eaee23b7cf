# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import logging

import github3
import github3.issues.comment
from github3.github import GitHub

logger = logging.getLogger(__name__)

TAG_REF_PREFIX = 'refs/tags/'


class RepositoryHelper:
    '''
    wraps exactly the API-operations needed for creating release-notes for one repository.

    Read operations return the (raw) json-documents as returned by GitHub's v3 API, so
    consumers depend on the documented API-schema rather than on github3.py's object-model.
    '''
    def __init__(
        self,
        owner: str,
        name: str,
        github_api: GitHub=None,
    ):
        '''
        Args:
            owner (str):    repository owner (also called organisation in GitHub)
            name (str):     repository name
            github_api (GitHub): github api to use
        '''
        if not github_api:
            raise ValueError('must pass github_api')

        self.github = github_api
        self.owner = owner
        self.repository_name = name

        self.repository = self._create_repository(
            owner=owner,
            name=name,
        )

    def _create_repository(self, owner: str, name: str):
        repository = self.github.repository(
            owner=owner,
            repository=name,
        )
        if not repository:
            raise RuntimeError(f'failed to retrieve repository {owner}/{name}')
        return repository

    def tag_names(self) -> list[str]:
        '''
        returns the names of all tags (w/o `refs/tags/` prefix), in the order returned by GitHub
        '''
        return [
            ref.ref.removeprefix(TAG_REF_PREFIX)
            for ref in self.repository.refs(subspace='tags')
        ]

    def compare(self, base: str, head: str) -> dict:
        logger.info(f'comparing {base}...{head} in {self.owner}/{self.repository_name}')
        comparison = self.repository.compare_commits(
            base=base,
            head=head,
        )
        if not comparison:
            raise RuntimeError(
                f'failed to compare {base}...{head} in {self.owner}/{self.repository_name}'
            )
        return comparison.as_dict()

    def pull_request(self, number: int) -> dict | None:
        '''
        returns the pull request with the given number, or None if there is no such pull
        request (github3.py returns None for http-404)
        '''
        if not (pull_request := self.repository.pull_request(number)):
            return None
        return pull_request.as_dict()

    # pylint: disable=protected-access
    # noinspection PyProtectedMember
    def issue_comments(self, number: int) -> list[dict]:
        '''
        returns the comments of the issue (or pull request) with the given number in the order
        returned by GitHub (oldest first)
        '''
        url = self.repository._build_url(
            'issues',
            str(number),
            'comments',
            base_url=self.repository._api,
        )
        return [
            comment.as_dict()
            for comment in self.repository._iter(-1, url, github3.issues.comment.IssueComment)
        ]

    def create_release(
        self,
        tag_name: str,
        name: str,
        body: str,
    ) -> str:
        '''
        creates a (non-draft) release for the given (existing) tag and returns its html-url
        '''
        release = self.repository.create_release(
            tag_name=tag_name,
            name=name,
            body=body,
        )
        if not release:
            raise RuntimeError(
                f'failed to create release {name=} in {self.owner}/{self.repository_name}'
            )
        return release.html_url
