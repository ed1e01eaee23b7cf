import dataclasses
import datetime
import types
import typing

import dateutil.parser


class ReleaseNotesError(Exception):
    pass


class ConfigError(ReleaseNotesError, ValueError):
    pass


class TagNotFound(ReleaseNotesError):
    def __init__(self, tag: str):
        super().__init__(f'Could not find tag {tag}')
        self.tag = tag


class NoPreviousRelease(ReleaseNotesError):
    '''
    raised if the requested tag is the smallest (w.r.t. version-order) tag of a repository. This
    is not a failure of the run itself; callers processing multiple tags should report it as a
    warning and carry on.
    '''
    def __init__(self, tag: str):
        super().__init__(f'No previous release found for tag {tag}')
        self.tag = tag


@dataclasses.dataclass(frozen=True)
class Tag:
    name: str
    url: str


@dataclasses.dataclass(frozen=True)
class Author:
    name: str
    url: str
    avatar: str

    @staticmethod
    def from_user(user: dict | None) -> typing.Optional['Author']:
        # commits w/o linked GitHub-account have no user
        if not user:
            return None

        return Author(
            name=user['login'],
            url=user['html_url'],
            avatar=user['avatar_url'],
        )


@dataclasses.dataclass(frozen=True)
class Commit:
    id: str
    url: str
    author: Author | None
    date: datetime.datetime
    message: str


@dataclasses.dataclass(frozen=True)
class FileChange:
    filename: str
    url: str
    status: str
    changes: int
    diff: str | None = None


@dataclasses.dataclass(frozen=True)
class Comment:
    url: str
    body: str
    author: Author | None
    date: datetime.datetime


@dataclasses.dataclass(frozen=True)
class PullRequest:
    url: str
    number: int
    title: str
    body: str | None
    author: Author | None
    date: datetime.datetime
    comments: tuple[Comment, ...] = ()


@dataclasses.dataclass(frozen=True)
class Diff:
    compare_url: str
    commits: tuple[Commit, ...]
    files: tuple[FileChange, ...]


View = types.MappingProxyType


def parse_timestamp(timestamp: str) -> datetime.datetime:
    '''
    parses ISO-8601 timestamps as returned by GitHub into tz-aware datetimes (in UTC)
    '''
    return dateutil.parser.isoparse(timestamp).astimezone(datetime.timezone.utc)
