# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import logging
import re
import typing

logger = logging.getLogger(__name__)

# MAJOR.MINOR[.PATCH[.BUILD]], numeric segments only
version_pattern = re.compile(r'[0-9]+\.[0-9]+(\.[0-9]+(\.[0-9]+)?)?')
tag_decoration_pattern = re.compile(r'tag:\s*v?(.*)', re.IGNORECASE)
decoration_separator = re.compile(r'\s*,\s*')


def is_version(value: str | None) -> bool:
    if not value:
        return False
    return bool(version_pattern.fullmatch(value))


def parse_version(value: str) -> str:
    '''
    returns the passed value if it is a valid version, raises `ValueError` otherwise. Suitable as
    `type` for argparse-arguments.
    '''
    if not is_version(value):
        raise ValueError(f'not a valid version (expected MAJOR.MINOR[.PATCH[.BUILD]]): {value!r}')
    return value


def split_ref_decorations(raw: str | None) -> tuple[str, ...]:
    '''
    splits the `%D` placeholder output of git-log (e.g. `HEAD -> main, tag: v1.2.3`) into
    single decorations, keeping the order emitted by git.
    '''
    if not raw or not raw.strip():
        return ()
    return tuple(
        decoration for decoration in decoration_separator.split(raw.strip())
        if decoration
    )


def tag_version(ref_decorations: typing.Iterable[str]) -> str | None:
    '''
    returns the version of the first tag-decoration whose name (optionally prefixed w/ `v`) is a
    valid version, or None if there is no such decoration.
    '''
    for decoration in ref_decorations:
        if not (match := tag_decoration_pattern.search(decoration)):
            continue
        candidate = match.group(1).strip()
        if is_version(candidate):
            return candidate
        logger.debug(f'ignoring non-version tag {decoration=}')

    return None
