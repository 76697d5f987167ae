import mergelog.model as mm
import mergelog.render as examinee


def test_render_version():
    assert examinee.render_version('1.10.0', ['First', 'Second']) == (
        '1.10.0\n'
        '======\n'
        ' * First\n'
        ' * Second\n'
    )


def test_render_changelog():
    rendered = examinee.render_changelog([
        mm.VersionMessages(version='1.1', messages=('Feature',)),
        mm.VersionMessages(version='1.0', messages=('Initial', 'Docs')),
    ])

    assert rendered == (
        '1.1\n'
        '===\n'
        ' * Feature\n'
        '\n'
        '1.0\n'
        '===\n'
        ' * Initial\n'
        ' * Docs\n'
        '\n'
    )


def test_render_changelog_stops_at_until_version():
    rendered = examinee.render_changelog(
        [
            mm.VersionMessages(version='1.2', messages=('New',)),
            mm.VersionMessages(version='1.1', messages=('Recorded',)),
            mm.VersionMessages(version='1.0', messages=('Recorded as well',)),
        ],
        until_version='1.1',
    )

    assert rendered == '1.2\n===\n * New\n\n'


def test_render_changelog_empty():
    assert examinee.render_changelog([]) == ''


def test_merge_changelog():
    document = mm.ChangelogDocument(
        header='# Changelog\n\n',
        body='1.0\n===\n * Initial\n',
        resume_version='1.0',
    )

    merged = examinee.merge_changelog(document=document, rendered='1.1\n===\n * New\n\n')

    assert merged == (
        '# Changelog\n'
        '\n'
        '1.1\n'
        '===\n'
        ' * New\n'
        '\n'
        '1.0\n'
        '===\n'
        ' * Initial\n'
    )
