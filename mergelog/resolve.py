import concurrent.futures
import logging
import re
import threading
import typing

import mergelog.markdown
import mergelog.model as mm

logger = logging.getLogger(__name__)

conflicts_pattern = re.compile(r'^(#\s*)?Conflicts:', re.IGNORECASE)
merge_branch_pattern = re.compile(r'^Merge (remote-tracking )?branch .*', re.IGNORECASE)
merge_request_pattern = re.compile(r'^See merge request !.*', re.IGNORECASE)

T = typing.TypeVar('T')
R = typing.TypeVar('R')


def parse_commit_message(body: str) -> tuple[tuple[str, ...], bool]:
    '''
    filters the given (raw) commit-message body

    - a `Conflicts:` line (optionally commented out) and all lines after it are dropped
    - `Merge branch ...` lines are dropped
    - `See merge request !...` lines are dropped; their presence marks a merge-request
    - empty lines are dropped, all other lines are kept (stripped of surrounding whitespace)

    :return: the retained lines and whether the message belongs to a merge-request
    '''
    lines = []
    is_merge_request = False

    for line in body.splitlines():
        line = line.strip()

        if conflicts_pattern.match(line):
            break

        if merge_branch_pattern.match(line):
            continue
        if merge_request_pattern.match(line):
            is_merge_request = True
            continue
        if line:
            lines.append(line)

    return tuple(lines), is_merge_request


def map_fail_fast(
    executor: concurrent.futures.Executor,
    func: typing.Callable[[T], R],
    items: typing.Iterable[T],
) -> list[R]:
    '''
    applies `func` to all items using the given executor. Results are returned in the order of
    `items`, regardless of completion order. If any invocation raises, pending invocations are
    cancelled and the first exception raised (in time, not in order of `items`) is re-raised.

    Must not be called from within a worker of `executor`.
    '''
    failures = []
    failures_lock = threading.Lock()

    def call(item):
        try:
            return func(item)
        except BaseException as e:
            with failures_lock:
                failures.append(e)
            raise

    futures = [executor.submit(call, item) for item in items]
    if not futures:
        return []

    _, not_done = concurrent.futures.wait(
        futures,
        return_when=concurrent.futures.FIRST_EXCEPTION,
    )

    if failures:
        for future in not_done:
            future.cancel()
        raise failures[0]

    return [future.result() for future in futures]


class MessageResolver:
    def __init__(
        self,
        history_provider: mm.HistoryProvider,
        sanitizer: mm.TextSanitizer | None=None,
        all_commits: bool=False,
        trim: bool=True,
        max_workers: int=4,
    ):
        if max_workers < 1:
            raise ValueError(f'{max_workers=} must be positive')

        self.history_provider = history_provider
        self.sanitizer = sanitizer or mergelog.markdown.MarkdownStripper()
        self.all_commits = all_commits
        self.trim = trim
        self.max_workers = max_workers

    def resolve(self, hexsha: str) -> mm.ResolvedMessage:
        body = self.history_provider.commit_message(hexsha)
        lines, is_merge_request = parse_commit_message(body)

        if not (self.all_commits or is_merge_request):
            text = ''
        elif self.trim and lines:
            text = lines[0]
        else:
            text = '\n'.join(lines)

        if text:
            text = self.sanitizer(text)

        return mm.ResolvedMessage(
            hexsha=hexsha,
            text=text,
            is_merge_request=is_merge_request,
        )

    def resolve_versions(
        self,
        buckets: typing.Iterable[mm.VersionBucket],
    ) -> list[mm.VersionMessages]:
        '''
        resolves commit-messages for all given buckets. Versions w/o any remaining message are
        omitted.

        All fetches (of all buckets) are submitted to one pool from the calling thread, so at most
        `max_workers` fetches run at any time, and no pool-worker ever waits for another. Results
        are reassembled by position. If a fetch fails, fetches not yet started are cancelled;
        running ones are awaited before the error is re-raised.
        '''
        buckets = list(buckets)
        fetches = [
            (bucket_idx, hexsha)
            for bucket_idx, bucket in enumerate(buckets)
            for hexsha in bucket.commits
        ]

        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix='mergelog-message',
        )
        try:
            resolved = map_fail_fast(
                executor=executor,
                func=lambda fetch: self.resolve(fetch[1]),
                items=fetches,
            )
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        texts = [[] for _ in buckets]
        for (bucket_idx, _), message in zip(fetches, resolved):
            if message.text:
                texts[bucket_idx].append(message.text)

        versions = []
        for bucket, bucket_texts in zip(buckets, texts):
            logger.info(f'Processing version {bucket.version}')
            if not bucket_texts:
                continue
            versions.append(mm.VersionMessages(
                version=bucket.version,
                messages=tuple(bucket_texts),
            ))

        return versions
