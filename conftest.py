import itertools

import git
import pytest


class RepoBuilder:
    '''
    creates commits w/ strictly increasing commit-dates, so git-log order is deterministic
    '''
    def __init__(self, repo: git.Repo):
        self.repo = repo
        self._timestamps = itertools.count(1700000000, 60)

    def commit(self, message: str, parents=None, tag: str | None=None) -> git.Commit:
        date = f'{next(self._timestamps)} +0000'
        kwargs = {}
        if parents is not None:
            kwargs['parent_commits'] = parents

        commit = self.repo.index.commit(
            message,
            author_date=date,
            commit_date=date,
            **kwargs,
        )
        if tag:
            self.repo.create_tag(tag, ref=commit)
        return commit

    def side_commit(self, message: str, parent: git.Commit) -> git.Commit:
        '''
        creates a commit w/o moving HEAD (e.g. a feature-branch commit)
        '''
        date = f'{next(self._timestamps)} +0000'
        return self.repo.index.commit(
            message,
            parent_commits=(parent,),
            head=False,
            author_date=date,
            commit_date=date,
        )

    def merge(self, message: str, other: git.Commit, tag: str | None=None) -> git.Commit:
        return self.commit(
            message,
            parents=(self.repo.head.commit, other),
            tag=tag,
        )


@pytest.fixture
def git_repo(tmp_path):
    repo = git.Repo.init(tmp_path)
    with repo.config_writer() as cfg:
        cfg.set_value('user', 'name', 'Test User')
        cfg.set_value('user', 'email', 'test@example.com')
    return repo


@pytest.fixture
def repo_builder(git_repo):
    return RepoBuilder(git_repo)
