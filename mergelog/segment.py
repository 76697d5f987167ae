'''
Version segmentation

Folds the reverse-chronological history stream into version buckets. A commit belongs to the
version that is current when it is reached while walking from newest to oldest commit, i.e. to
the closest version tag at or after it (in commit order: the tag of the release containing it).

Segmentation stops at the commit tagged with the resume version (the newest version already
recorded in the changelog). Neither that commit nor any older one is consumed.
'''
import dataclasses
import logging
import typing

import mergelog.model as mm
import version as version_mod

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SegmenterState:
    version: str | None = None
    commits: tuple[str, ...] = ()
    done: bool = False

    def bucket(self) -> mm.VersionBucket | None:
        if not self.version:
            return None
        return mm.VersionBucket(
            version=self.version,
            commits=self.commits,
        )


@dataclasses.dataclass(frozen=True)
class Segmenter:
    all_commits: bool = False
    until_version: str | None = None
    start_version: str | None = None

    def initial_state(self) -> SegmenterState:
        return SegmenterState(version=self.start_version)

    def retains(self, record: mm.CommitRecord) -> bool:
        return bool(record.hexsha) and (self.all_commits or record.is_merge_commit)

    def step(
        self,
        state: SegmenterState,
        record: mm.CommitRecord,
    ) -> tuple[SegmenterState, mm.VersionBucket | None]:
        if state.done:
            raise ValueError('segmentation already finished')

        emitted = None
        if (tag := version_mod.tag_version(record.ref_decorations)):
            if tag == self.until_version:
                logger.info(f'Reached last version {tag} from changelog file.')
                return dataclasses.replace(state, done=True), None

            emitted = state.bucket()
            state = SegmenterState(version=tag)
            logger.info(f'VERSION: {tag}')

        if state.version and self.retains(record):
            logger.debug(f' * {record.hexsha}')
            state = dataclasses.replace(state, commits=(*state.commits, record.hexsha))

        return state, emitted

    def finish(self, state: SegmenterState) -> mm.VersionBucket | None:
        '''
        seals the bucket that is open once history is exhausted (or the resume version was
        reached)
        '''
        return state.bucket()


def iter_version_buckets(
    records: typing.Iterable[mm.CommitRecord],
    segmenter: Segmenter,
) -> typing.Generator[mm.VersionBucket, None, None]:
    '''
    drives the given segmenter over the given records, yielding buckets in detection order.
    Consumption of `records` ends as soon as the resume version is reached; if `records` is a
    generator, it is closed in that case.
    '''
    state = segmenter.initial_state()
    if state.version:
        logger.info(f'START VERSION: {state.version}')

    records = iter(records)
    try:
        for record in records:
            state, emitted = segmenter.step(state, record)
            if emitted:
                yield emitted
            if state.done:
                break
    finally:
        if close := getattr(records, 'close', None):
            close()

    if (bucket := segmenter.finish(state)):
        yield bucket


def segment(
    records: typing.Iterable[mm.CommitRecord],
    all_commits: bool=False,
    until_version: str | None=None,
    start_version: str | None=None,
) -> list[mm.VersionBucket]:
    return list(iter_version_buckets(
        records=records,
        segmenter=Segmenter(
            all_commits=all_commits,
            until_version=until_version,
            start_version=start_version,
        ),
    ))
