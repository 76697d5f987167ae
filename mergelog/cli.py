#! /usr/bin/env python3
import argparse
import importlib.metadata
import logging
import sys

import ci.log
import ctx
import gitutil
import mergelog.generate
import mergelog.markdown
import mergelog.model as mm
import mergelog.store
import version as version_mod

logger = logging.getLogger('mergelog')


def _version_arg(value: str) -> str:
    try:
        return version_mod.parse_version(value)
    except ValueError as ve:
        raise argparse.ArgumentTypeError(str(ve))


def _positive_int(value: str) -> int:
    try:
        value = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f'not an integer: {value!r}')
    if value < 1:
        raise argparse.ArgumentTypeError(f'must be positive: {value}')
    return value


def _own_version() -> str:
    try:
        return importlib.metadata.version('mergelog')
    except importlib.metadata.PackageNotFoundError:
        return 'dev'


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='mergelog',
        description=(
            'Generate changelog from merge requests in Git history of current repository and '
            'prepend it to specified file.'
        ),
    )
    # defaults are None so that unset arguments do not override configuration files
    parser.add_argument(
        '-b', '--branch',
        metavar='REFNAME',
        default=None,
        help='branch to generate changelog for (default: currently checked-out branch)',
    )
    parser.add_argument(
        '-a', '--all',
        dest='all_commits',
        action='store_true',
        default=None,
        help='use all commits, not only merge requests',
    )
    parser.add_argument(
        '-f', '--changelog',
        dest='changelog_file',
        metavar='FILE',
        default=None,
        help='file to output changelog to (default: CHANGELOG.md)',
    )
    parser.add_argument(
        '-s', '--start-version',
        metavar='VERSION',
        type=_version_arg,
        default=None,
        help='set this version before processing commits',
    )
    parser.add_argument(
        '-o', '--overwrite',
        action='store_true',
        default=None,
        help='overwrite changelog instead of prepending',
    )
    parser.add_argument(
        '-T', '--no-trim',
        dest='trim',
        action='store_false',
        default=None,
        help='do not trim commit messages to oneline title',
    )
    parser.add_argument(
        '-M', '--keep-markdown',
        dest='strip_markdown',
        action='store_false',
        default=None,
        help='keep markdown-formatting in commit messages (default: strip to plain text)',
    )
    parser.add_argument(
        '--repo-path',
        default=None,
        help='path to (a directory within) the git repository (default: cwd)',
    )
    parser.add_argument(
        '--max-workers',
        type=_positive_int,
        default=None,
        help='maximum number of concurrent git processes (default: 4)',
    )
    parser.add_argument(
        '--cfg',
        default=None,
        help='YAML file to read configuration from',
    )
    parser.add_argument('--quiet', action='store_true')
    parser.add_argument('--verbose', action='store_true')
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {_own_version()}',
    )

    return parser.parse_args(argv)


def cfg_from_args(parsed: argparse.Namespace) -> ctx.MergelogCfg:
    return ctx.MergelogCfg(
        branch=parsed.branch,
        all_commits=parsed.all_commits,
        changelog_file=parsed.changelog_file,
        start_version=parsed.start_version,
        overwrite=parsed.overwrite,
        trim=parsed.trim,
        max_workers=parsed.max_workers,
        repo_path=parsed.repo_path,
        strip_markdown=parsed.strip_markdown,
    )


def _run(cfg: ctx.MergelogCfg):
    logger.info(
        f'\n{cfg.branch or "<current>"}  --{"-/overwrite/--" if cfg.overwrite else ""}->  '
        f'{cfg.changelog_file}\n'
    )

    git_helper = gitutil.GitHelper.from_path(cfg.repo_path)
    store = mergelog.store.ChangelogStore(path=cfg.changelog_file)
    if cfg.strip_markdown:
        sanitizer = mergelog.markdown.MarkdownStripper()
    else:
        sanitizer = mergelog.markdown.Verbatim()

    mergelog.generate.update_changelog(
        history_provider=git_helper,
        store=store,
        options=mergelog.generate.GenerateOptions(
            branch=cfg.branch,
            all_commits=cfg.all_commits,
            start_version=cfg.start_version,
            overwrite=cfg.overwrite,
            trim=cfg.trim,
            max_workers=cfg.max_workers,
        ),
        sanitizer=sanitizer,
    )


def main(argv=None) -> int:
    parsed = parse_args(argv)
    ci.log.configure_default_logging(
        stdout_level=ci.log.stdout_level(quiet=parsed.quiet, verbose=parsed.verbose),
    )
    logger.info('MERGELOG')

    try:
        cfg = ctx.load_config(
            cfg_file=parsed.cfg,
            overrides=cfg_from_args(parsed),
        )
        _run(cfg)
    except mm.MergelogError as e:
        print(f'ERROR: {e}', file=sys.stderr)
        return 1

    logger.info('Success!')
    return 0


def run():
    sys.exit(main())


if __name__ == '__main__':
    run()
