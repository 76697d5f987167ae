import logging
import os

import mergelog.model as mm
import version as version_mod

logger = logging.getLogger(__name__)


def parse_changelog(text: str) -> mm.ChangelogDocument:
    '''
    splits the given changelog at its first line that consists only of a version (the last
    version recorded in the changelog). If there is no such line, all text is returned as
    header, and no resume-version is set.
    '''
    if not text:
        return mm.ChangelogDocument()

    offset = 0
    for line in text.splitlines(keepends=True):
        candidate = line.rstrip('\r\n')
        if version_mod.is_version(candidate):
            return mm.ChangelogDocument(
                header=text[:offset],
                body=text[offset:],
                resume_version=candidate,
            )
        offset += len(line)

    return mm.ChangelogDocument(header=text)


class ChangelogStore:
    def __init__(self, path: str, encoding: str='utf-8'):
        self.path = path
        self.encoding = encoding

    def read(self) -> str:
        if not os.path.isfile(self.path):
            logger.debug(f'{self.path=} does not exist (yet)')
            return ''

        try:
            with open(self.path, encoding=self.encoding, newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise mm.MergelogError(f'unable to read {self.path}: {e}') from e

    def write(self, text: str):
        try:
            with open(self.path, 'w', encoding=self.encoding, newline='') as f:
                f.write(text)
        except OSError as e:
            raise mm.ChangelogWriteError(f'unable to write {self.path}: {e}') from e

    def load_document(self, overwrite: bool=False) -> mm.ChangelogDocument:
        if overwrite:
            return mm.ChangelogDocument()

        document = parse_changelog(self.read())
        if document.resume_version:
            logger.info(f'Last version in changelog file is: {document.resume_version}')
        else:
            logger.info('No last version found in changelog.')

        return document
