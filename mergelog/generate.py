'''
Changelog generation pipeline

1. read the existing changelog, determine the last recorded (resume-) version
2. segment commit-history into versions, stopping at the resume version
3. resolve (and filter) commit-messages for each version
4. render new versions and insert them above the last recorded version

Stages run strictly one after another. Any error aborts the run before the changelog is
written.
'''
import dataclasses
import logging

import mergelog.markdown
import mergelog.model as mm
import mergelog.render
import mergelog.resolve
import mergelog.segment
import mergelog.store

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class GenerateOptions:
    branch: str | None = None
    all_commits: bool = False
    start_version: str | None = None
    overwrite: bool = False
    trim: bool = True
    max_workers: int = 4


def collect_versions(
    history_provider: mm.HistoryProvider,
    options: GenerateOptions,
    until_version: str | None=None,
    sanitizer: mm.TextSanitizer | None=None,
) -> list[mm.VersionMessages]:
    logger.info('Parsing git history...')
    buckets = mergelog.segment.segment(
        records=history_provider.iter_commit_records(branch=options.branch),
        all_commits=options.all_commits,
        until_version=until_version,
        start_version=options.start_version,
    )

    resolver = mergelog.resolve.MessageResolver(
        history_provider=history_provider,
        sanitizer=sanitizer or mergelog.markdown.MarkdownStripper(),
        all_commits=options.all_commits,
        trim=options.trim,
        max_workers=options.max_workers,
    )
    return resolver.resolve_versions(buckets)


def update_changelog(
    history_provider: mm.HistoryProvider,
    store: mergelog.store.ChangelogStore,
    options: GenerateOptions=GenerateOptions(),
    sanitizer: mm.TextSanitizer | None=None,
) -> str | None:
    '''
    prepends changelog-entries for all versions not yet contained in the changelog managed by
    the given store (or replaces its contents if `options.overwrite` is set).

    :return: the newly rendered changelog-blocks, or None if there were no updates (in which
        case the store is not written)
    '''
    document = store.load_document(overwrite=options.overwrite)

    versions = collect_versions(
        history_provider=history_provider,
        options=options,
        until_version=document.resume_version,
        sanitizer=sanitizer,
    )

    rendered = mergelog.render.render_changelog(
        versions=versions,
        until_version=document.resume_version,
    )

    if not rendered:
        logger.info('No changelog updates.')
        return None

    logger.info(f'\n{rendered}')
    logger.info(f'Writing changelog... ---> {store.path}')
    store.write(mergelog.render.merge_changelog(document=document, rendered=rendered))

    return rendered
