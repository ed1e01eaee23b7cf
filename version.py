# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import collections.abc
import logging
import semver

logger = logging.getLogger(__name__)


def parse_to_semver(
    version,
    invalid_semver_ok: bool=False,
) -> semver.VersionInfo:
    '''
    parses the given version into a semver.VersionInfo object.

    Different from strict semver, the given version is preprocessed, if required, to
    convert the version into a valid semver version, if possible.

    The following preprocessings are done:

    - strip away `v` prefix
    - append patch-level `.0` for two-digit versions
    - rm leading zeroes

    @param version: either a str, or a semver.VersionInfo
    '''
    if isinstance(version, semver.VersionInfo):
        return version
    elif version is None:
        raise ValueError('version must not be None')
    elif not isinstance(version, str):
        logger.warning(f'unexpected type for version: {type(version)}')
        version = str(version) # fallback

    try:
        semver_version_info, _ = _parse_to_semver_and_prefix(version)
    except ValueError:
        if invalid_semver_ok:
            return None

        raise

    return semver_version_info


def _parse_to_semver_and_prefix(version: str) -> tuple[semver.VersionInfo, str | None]:
    def raise_invalid():
        raise ValueError(f'not a valid (semver) version: `{version}`')

    if not version:
        raise_invalid()

    semver_version = version
    prefix = None

    # strip leading `v`
    if version[0] == 'v':
        semver_version = version[1:]
        prefix = 'v'

    # in most cases, we should be fine now
    try:
        return semver.VersionInfo.parse(semver_version), prefix
    except ValueError:
        pass # try extending `.0` as patch-level

    # blindly append patch-level
    if '-' in version:
        sep = '-'
    else:
        sep = '+'

    numeric, sep, suffix = semver_version.partition(sep)
    if len(tuple(c for c in numeric if c == '.')) == 1:
        numeric += '.0'

    try:
        return semver.VersionInfo.parse(numeric + sep + suffix), prefix
    except ValueError:
        pass # last try: strip leading zeroes

    try:
        major, minor, patch = numeric.split('.')
        numeric = '.'.join((
            str(int(major)),
            str(int(minor)),
            str(int(patch)),
        ))
    except ValueError:
        raise_invalid()

    try:
        return semver.VersionInfo.parse(numeric + sep + suffix), prefix
    except ValueError:
        # re-raise with original version str
        raise_invalid()


def sort_versions(
    versions: collections.abc.Iterable[str],
) -> list[str]:
    '''
    returns the given version strings in ascending order.

    Versions are compared using semver arithmetics, after being parsed with this module's
    `parse_to_semver` (which allows some deviations from strict semver-v2, e.g. a `v` prefix).
    Strings that cannot be parsed are sorted before all parseable versions (in alphabetical
    order). Versions that are equal in terms of semver (e.g. `1.2` and `v1.2.0`) are ordered by
    their str representation, so the result does not depend on the order of the input.
    '''
    def sort_key(version_str: str):
        if (parsed := parse_to_semver(version_str, invalid_semver_ok=True)) is None:
            return (0, semver.VersionInfo(0), version_str)
        return (1, parsed, version_str)

    return sorted(versions, key=sort_key)
