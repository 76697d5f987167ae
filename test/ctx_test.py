import pytest

import ctx as examinee
import mergelog.model as mm


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    home = tmp_path / 'home'
    home.mkdir()
    monkeypatch.setenv('HOME', str(home))
    monkeypatch.delenv(examinee.CFG_ENV_VAR, raising=False)
    return home


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    cfg = examinee.load_config()

    assert cfg == examinee.MergelogCfg(
        branch='',
        all_commits=False,
        changelog_file='CHANGELOG.md',
        start_version=None,
        overwrite=False,
        trim=True,
        max_workers=4,
        repo_path=str(tmp_path),
        strip_markdown=True,
    )


def test_cfg_from_file(tmp_path):
    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text(
        'branch: release-1.x\n'
        'changelog-file: HISTORY.md\n'
        'max-workers: 2\n'
        'trim: false\n'
        'strip-markdown: false\n'
    )

    cfg = examinee.cfg_from_file(str(cfg_file))

    assert cfg.branch == 'release-1.x'
    assert cfg.changelog_file == 'HISTORY.md'
    assert cfg.max_workers == 2
    assert cfg.trim is False
    assert cfg.strip_markdown is False
    assert cfg.all_commits is None


def test_cfg_from_file_rejects_unknown_keys(tmp_path):
    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text('brnach: main\n')

    with pytest.raises(mm.ConfigError):
        examinee.cfg_from_file(str(cfg_file))


def test_cfg_from_file_rejects_wrong_types(tmp_path):
    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text('max-workers: many\n')

    with pytest.raises(mm.ConfigError):
        examinee.cfg_from_file(str(cfg_file))


def test_cfg_from_file_rejects_non_mappings(tmp_path):
    cfg_file = tmp_path / 'cfg.yaml'
    cfg_file.write_text('- a\n- b\n')

    with pytest.raises(mm.ConfigError):
        examinee.cfg_from_file(str(cfg_file))


def test_cfg_from_missing_file(tmp_path):
    with pytest.raises(mm.ConfigError):
        examinee.cfg_from_file(str(tmp_path / 'missing.yaml'))


def test_merge_cfgs_does_not_override_with_unset_values():
    left = examinee.MergelogCfg(branch='main', trim=True, max_workers=4)
    right = examinee.MergelogCfg(trim=False)

    merged = examinee.merge_cfgs(left, right)

    assert merged.branch == 'main'
    assert merged.trim is False
    assert merged.max_workers == 4


def test_merge_cfgs_with_missing_side():
    cfg = examinee.MergelogCfg(branch='main')

    assert examinee.merge_cfgs(cfg, None) is cfg
    assert examinee.merge_cfgs(None, cfg) is cfg


def test_layering(isolated_env, tmp_path, monkeypatch):
    (isolated_env / examinee.USER_CFG_FILE_NAME).write_text(
        'branch: from-home\n'
        'changelog-file: HOME.md\n'
        'max-workers: 2\n'
        'all-commits: true\n'
    )
    env_cfg = tmp_path / 'env.yaml'
    env_cfg.write_text(
        'changelog-file: ENV.md\n'
        'max-workers: 3\n'
    )
    monkeypatch.setenv(examinee.CFG_ENV_VAR, str(env_cfg))
    explicit_cfg = tmp_path / 'explicit.yaml'
    explicit_cfg.write_text('max-workers: 5\n')

    cfg = examinee.load_config(
        cfg_file=str(explicit_cfg),
        overrides=examinee.MergelogCfg(branch='from-args'),
    )

    assert cfg.branch == 'from-args'
    assert cfg.changelog_file == 'ENV.md'
    assert cfg.max_workers == 5
    assert cfg.all_commits is True
    assert cfg.trim is True


@pytest.mark.parametrize('overrides', [
    examinee.MergelogCfg(start_version='latest'),
    examinee.MergelogCfg(max_workers=0),
    examinee.MergelogCfg(changelog_file=''),
])
def test_invalid_configuration(overrides):
    with pytest.raises(mm.ConfigError):
        examinee.load_config(overrides=overrides)
