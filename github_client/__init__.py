# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import os

import github3

GITHUB_COM = 'github.com'


@dataclasses.dataclass(frozen=True)
class GithubCredentials:
    '''
    credentials passed to github3.py. Either `token`, or `username` and `password` must be set.
    '''
    token: str | None = None
    username: str | None = None
    password: str | None = None

    def is_complete(self) -> bool:
        return bool(self.token or (self.username and self.password))


@dataclasses.dataclass(frozen=True)
class ApiOptions:
    '''
    host:   hostname of the GitHub instance (also used for rendered tag-urls)
    url:    api-url (only honoured for GitHub-Enterprise; defaults to `https://<host>`)
    verify: whether to verify TLS-certificates (GitHub-Enterprise only)
    '''
    host: str = GITHUB_COM
    url: str | None = None
    verify: bool = True


def host_org_and_repo() -> tuple[str, str, str]:
    '''
    returns a three-tuple of `host`, `org`, `repo`, read from environment variables
    GITHUB_SERVER_URL, GITHUB_REPOSITORY (as set for GitHub-Actions-runs)
    '''
    host = os.environ['GITHUB_SERVER_URL'].removeprefix('https://')
    org, repo = os.environ['GITHUB_REPOSITORY'].split('/')

    return host, org, repo


def github_api(
    credentials: GithubCredentials,
    api_options: ApiOptions=None,
) -> github3.GitHub:
    '''
    returns an initialised github-api instance for the host configured in `api_options`
    (github.com if absent), authenticated using the given credentials.
    '''
    api_options = api_options or ApiOptions()

    token = credentials.token or ''
    username = credentials.username or ''
    password = credentials.password or ''

    if api_options.host == GITHUB_COM:
        return github3.GitHub(
            username=username,
            password=password,
            token=token,
        )

    return github3.GitHubEnterprise(
        url=api_options.url or f'https://{api_options.host}',
        username=username,
        password=password,
        token=token,
        verify=api_options.verify,
    )
