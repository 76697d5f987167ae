import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def _read_requirements(file_name: str):
    with open(os.path.join(own_dir, file_name)) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            yield line


def requirements():
    yield from _read_requirements('requirements.txt')


def test_requirements():
    yield from _read_requirements('requirements.test.txt')


def modules():
    return [
        'ctx',
        'gitutil',
        'version',
    ]


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='mergelog',
    version=version(),
    description='Generate changelogs from merge requests in git history',
    python_requires='>=3.10',
    py_modules=modules(),
    packages=['ci', 'mergelog'],
    install_requires=list(requirements()),
    extras_require={
        'test': list(test_requirements()),
    },
    entry_points={
        'console_scripts': [
            'mergelog = mergelog.cli:run',
        ],
    },
)
