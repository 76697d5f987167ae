import itertools
import logging
import typing

import mergelog.model as mm

logger = logging.getLogger(__name__)


def render_version(version: str, messages: typing.Iterable[str]) -> str:
    lines = [
        version,
        '=' * len(version),
        *(f' * {message}' for message in messages),
    ]
    return '\n'.join(lines) + '\n'


def render_changelog(
    versions: typing.Iterable[mm.VersionMessages],
    until_version: str | None=None,
) -> str:
    '''
    renders the given versions as changelog-blocks (separated by an empty line), newest first.
    Rendering stops at the version equal to `until_version`, which is already contained in the
    existing changelog.
    '''
    if until_version:
        logger.info(f'Generating changelog until version {until_version}')
    else:
        logger.info('Generating changelog')

    versions = itertools.takewhile(
        lambda version_messages: version_messages.version != until_version,
        versions,
    )

    return ''.join(
        render_version(
            version=version_messages.version,
            messages=version_messages.messages,
        ) + '\n'
        for version_messages in versions
    )


def merge_changelog(document: mm.ChangelogDocument, rendered: str) -> str:
    '''
    inserts newly rendered blocks between the existing changelog's header and its body (which
    starts with the last recorded version)
    '''
    return document.header + rendered + document.body
