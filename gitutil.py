# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0


import logging
import typing

import git
import git.exc

import mergelog.model as mm
import version as version_mod

logger = logging.getLogger(__name__)

# <abbreviated-hash> <space-separated parent-hashes>#<comma-separated ref-decorations>
LOG_FORMAT = 'tformat:%h %p#%D'
MESSAGE_FORMAT = 'tformat:%B'


def parse_log_line(line: str) -> mm.CommitRecord | None:
    '''
    parses a line as emitted by `git log --pretty=tformat:%h %p#%D`. Returns None for empty
    lines.
    '''
    line = line.strip()
    if not line:
        return None

    hashes, _, decorations = line.partition('#')
    if not (hashes := hashes.split()):
        return None
    hexsha, *parents = hashes

    return mm.CommitRecord(
        hexsha=hexsha,
        parent_count=len(parents),
        ref_decorations=version_mod.split_ref_decorations(decorations),
    )


class GitHelper:
    '''
    reads commit-history from a local git-repository (implements `mergelog.model.HistoryProvider`)
    '''
    def __init__(
        self,
        repo,
    ):
        if repo is None:
            raise ValueError(repo)
        if isinstance(repo, str):
            repo = git.Repo(repo)
        if not isinstance(repo, git.Repo):
            raise ValueError(repo)

        self.repo = repo

    @staticmethod
    def from_path(repo_path: str) -> 'GitHelper':
        '''
        opens the git-repository containing the given path (parent directories are searched)
        '''
        try:
            repo = git.Repo(repo_path, search_parent_directories=True)
        except (git.exc.InvalidGitRepositoryError, git.exc.NoSuchPathError) as e:
            raise mm.HistoryReadError(f'not a git repository: {repo_path}') from e

        return GitHelper(repo=repo)

    def iter_commit_records(
        self,
        branch: str | None=None,
    ) -> typing.Generator[mm.CommitRecord, None, None]:
        '''
        streams the history of the given branch (or of `HEAD`), newest commit first. If the
        returned generator is closed before history is exhausted, the underlying git-process is
        killed.

        :raises mergelog.model.HistoryReadError: if git-log exits w/ a non-zero status
        '''
        args = [f'--pretty={LOG_FORMAT}']
        if branch:
            args.append(branch)

        logger.debug(f'git log {" ".join(args)}')
        process = self.repo.git.log(*args, as_process=True)

        exhausted = False
        try:
            for raw_line in process.stdout:
                if not (record := parse_log_line(raw_line.decode('utf-8', errors='replace'))):
                    continue
                yield record
            exhausted = True
        finally:
            if not exhausted:
                logger.debug('stopping git log before end of history')
                process.proc.kill()
                process.proc.wait()

        try:
            process.wait()
        except git.exc.GitCommandError as e:
            raise mm.HistoryReadError(
                f'Unable to get merge commits. Git errored with code #{e.status}: '
                f'{e.stderr.strip()}'
            ) from e

    def commit_message(self, hexsha: str) -> str:
        try:
            return self.repo.git.show('-s', f'--pretty={MESSAGE_FORMAT}', hexsha)
        except git.exc.GitCommandError as e:
            raise mm.MessageFetchError(
                hexsha=hexsha,
                reason=f'Git errored with code #{e.status}',
            ) from e
