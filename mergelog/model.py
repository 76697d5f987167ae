import dataclasses
import typing


class MergelogError(RuntimeError):
    pass


class HistoryReadError(MergelogError):
    pass


class MessageFetchError(MergelogError):
    def __init__(self, hexsha: str, reason: str):
        self.hexsha = hexsha
        super().__init__(f'unable to get commit message for {hexsha}: {reason}')


class ChangelogWriteError(MergelogError):
    pass


class ConfigError(MergelogError):
    pass


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    '''
    one line of the history-stream (newest commits first)

    parent_count: number of parent commits; merge-commits have two or more
    '''
    hexsha: str
    parent_count: int
    ref_decorations: tuple[str, ...] = ()

    @property
    def is_merge_commit(self) -> bool:
        return self.parent_count > 1


@dataclasses.dataclass(frozen=True)
class VersionBucket:
    version: str
    commits: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class ResolvedMessage:
    hexsha: str
    text: str
    is_merge_request: bool = False


@dataclasses.dataclass(frozen=True)
class VersionMessages:
    version: str
    messages: tuple[str, ...] = ()


@dataclasses.dataclass(frozen=True)
class ChangelogDocument:
    '''
    existing changelog, split at the first line that consists of a bare version

    header: everything before said line (kept above newly generated content)
    body: said line and everything after it (kept below newly generated content)
    resume_version: the version read from said line, if any
    '''
    header: str = ''
    body: str = ''
    resume_version: str | None = None

    @property
    def text(self) -> str:
        return self.header + self.body


@typing.runtime_checkable
class HistoryProvider(typing.Protocol):
    def iter_commit_records(self, branch: str | None=None) -> typing.Iterator[CommitRecord]:
        '''
        yields commit-records in reverse-chronological order. Closing the returned iterator
        must stop reading history.
        '''
        ...

    def commit_message(self, hexsha: str) -> str:
        ...


@typing.runtime_checkable
class TextSanitizer(typing.Protocol):
    def __call__(self, text: str) -> str:
        ...
