# SPDX-FileCopyrightText: 2024 SAP SE or an SAP affiliate company and Gardener contributors
#
# SPDX-License-Identifier: Apache-2.0

import dataclasses
import logging
import os

import dacite
import yaml

import ci.util
import mergelog.model as mm
import version as version_mod

'''
Execution context. Configuration is layered (later layers win):

- defaults
- ~/.mergelog.yaml
- file referenced by env-var MERGELOG_CFG
- file passed via `--cfg`
- explicitly passed command-line arguments
'''

logger = logging.getLogger(__name__)

CFG_ENV_VAR = 'MERGELOG_CFG'
USER_CFG_FILE_NAME = '.mergelog.yaml'


@dataclasses.dataclass
class MergelogCfg:
    '''
    unset attributes (None) do not override values from previous configuration layers
    '''
    branch: str | None = None
    all_commits: bool | None = None
    changelog_file: str | None = None
    start_version: str | None = None
    overwrite: bool | None = None
    trim: bool | None = None
    max_workers: int | None = None
    repo_path: str | None = None
    strip_markdown: bool | None = None


def default_cfg() -> MergelogCfg:
    return MergelogCfg(
        branch='',
        all_commits=False,
        changelog_file='CHANGELOG.md',
        start_version=None,
        overwrite=False,
        trim=True,
        max_workers=4,
        repo_path=os.getcwd(),
        strip_markdown=True,
    )


def merge_cfgs(left: MergelogCfg | None, right: MergelogCfg | None) -> MergelogCfg | None:
    if not left or not right:
        return left or right # nothing to merge

    left_dict = dataclasses.asdict(left)
    # do not overwrite existing values w/ None
    right_dict = {k: v for k, v in dataclasses.asdict(right).items() if v is not None}

    if not right_dict:
        return left

    merged = ci.util.merge_dicts(left_dict, right_dict)

    return dacite.from_dict(
        data_class=MergelogCfg,
        data=merged,
    )


def cfg_from_file(path: str) -> MergelogCfg:
    try:
        ci.util.existing_file(path)
        raw = ci.util.parse_yaml_file(path) or {}
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise mm.ConfigError(f'unable to read configuration from {path}: {e}') from e

    if not isinstance(raw, dict):
        raise mm.ConfigError(f'expected a mapping in {path}, found {type(raw).__name__}')

    # allow dashes in keys (as in command-line arguments)
    raw = {k.replace('-', '_'): v for k, v in raw.items()}

    try:
        return dacite.from_dict(
            data_class=MergelogCfg,
            data=raw,
            config=dacite.Config(strict=True),
        )
    except dacite.DaciteError as e:
        raise mm.ConfigError(f'invalid configuration in {path}: {e}') from e


def _cfg_from_user_home() -> MergelogCfg | None:
    cfg_file_path = os.path.join(os.path.expanduser('~'), USER_CFG_FILE_NAME)
    if not os.path.isfile(cfg_file_path):
        return None

    logger.debug(f'reading configuration from {cfg_file_path=}')
    return cfg_from_file(cfg_file_path)


def _cfg_from_env() -> MergelogCfg | None:
    if not (cfg_file_path := os.environ.get(CFG_ENV_VAR)):
        return None

    logger.debug(f'reading configuration from {cfg_file_path=} ({CFG_ENV_VAR})')
    return cfg_from_file(cfg_file_path)


def validate_cfg(cfg: MergelogCfg) -> MergelogCfg:
    if cfg.start_version and not version_mod.is_version(cfg.start_version):
        raise mm.ConfigError(f'invalid start-version: {cfg.start_version!r}')
    if cfg.max_workers is not None and cfg.max_workers < 1:
        raise mm.ConfigError(f'max-workers must be positive, got {cfg.max_workers}')
    if not cfg.changelog_file:
        raise mm.ConfigError('changelog-file must not be empty')

    return cfg


def load_config(
    cfg_file: str | None=None,
    overrides: MergelogCfg | None=None,
) -> MergelogCfg:
    cfg = default_cfg()

    additional_cfgs = (
        _cfg_from_user_home(),
        _cfg_from_env(),
        cfg_from_file(cfg_file) if cfg_file else None,
        overrides,
    )

    for additional_cfg in additional_cfgs:
        if not additional_cfg:
            continue

        cfg = merge_cfgs(cfg, additional_cfg)

    return validate_cfg(cfg)
