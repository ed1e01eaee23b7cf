#! /usr/bin/env python3
import argparse
import collections.abc
import concurrent.futures
import locale
import logging
import sys

import ci.log
import release_notes.config
import release_notes.model as rnm
import release_notes.pipeline
import release_notes.render

logger = logging.getLogger(__name__)

_disabling_values = ('false', '0', 'off', 'no')


def _flag(value: str) -> bool:
    return value.lower() not in _disabling_values


def parse_args(argv: collections.abc.Sequence[str] | None=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='github-release',
        description='Create GitHub-releases w/ release-notes generated from changes since the '
            'previous tag',
    )
    parser.add_argument(
        'tags',
        nargs='*',
        metavar='TAG',
        help='tag(s) to create releases for',
    )
    parser.add_argument(
        '--config',
        help='path to config file (discovered from working directory if omitted)',
    )
    parser.add_argument(
        '--preview',
        nargs='?',
        const=True,
        default='false',
        type=_flag,
        help='print release-notes instead of publishing them (false|0|off|no to disable)',
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
    )

    parsed = parser.parse_args(argv)
    if not parsed.tags:
        parser.error('No tags provided')

    return parsed


def create_releases(
    config_dict: dict,
    tags: collections.abc.Sequence[str],
    preview: bool=False,
    template_cache: release_notes.render.TemplateCache | None=None,
) -> bool:
    '''
    creates releases for all given tags concurrently. Failures are reported per tag, and do not
    affect release-creation for other tags.

    returns whether all releases were created (tags w/o previous release do not count as failed)
    '''
    if template_cache is None:
        template_cache = release_notes.render.TemplateCache()

    def create_release(tag: str):
        config = release_notes.config.release_config(
            config_dict=config_dict,
            tag=tag,
            preview=preview,
        )
        return release_notes.pipeline.create_release(
            config=config,
            template_cache=template_cache,
        )

    succeeded = True

    with concurrent.futures.ThreadPoolExecutor(max_workers=max(len(tags), 1)) as pool:
        futures = {
            pool.submit(create_release, tag): tag
            for tag in tags
        }
        for future in concurrent.futures.as_completed(futures):
            tag = futures[future]
            try:
                result = future.result()
            except rnm.NoPreviousRelease as npr:
                logger.warning(npr)
                continue
            except Exception as e:
                logger.error(f'failed to create release for {tag}: {e}', exc_info=e)
                succeeded = False
                continue

            if preview:
                print(result)
            else:
                print(f'Release {tag} published at {result}')

    return succeeded


def main(argv: collections.abc.Sequence[str] | None=None):
    parsed = parse_args(argv)

    ci.log.configure_default_logging(
        stdout_level=logging.DEBUG if parsed.verbose else logging.INFO,
        print_thread_id=len(parsed.tags) > 1,
    )

    # dates are rendered w/ the user's locale-settings (see release_notes.view.formatted_date)
    try:
        locale.setlocale(locale.LC_TIME, '')
    except locale.Error as le:
        logger.warning(f'failed to apply locale-settings, dates will use C-locale: {le}')

    try:
        config_dict = release_notes.config.load_config_dict(path=parsed.config)
    except rnm.ConfigError as ce:
        logger.error(ce)
        sys.exit(1)

    if not create_releases(
        config_dict=config_dict,
        tags=parsed.tags,
        preview=parsed.preview,
    ):
        sys.exit(1)


if __name__ == '__main__':
    main()
