import setuptools
import os

own_dir = os.path.abspath(os.path.dirname(__file__))


def requirements():
    with open(os.path.join(own_dir, 'requirements.txt')) as f:
        for line in f.readlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            yield line


def modules():
    return [
        'version',
    ]


def packages():
    return [
        'ci',
        'github_client',
        'release_notes',
    ]


def version():
    with open(os.path.join(own_dir, 'VERSION')) as f:
        return f.read().strip()


setuptools.setup(
    name='github-release-notes',
    version=version(),
    description='Create GitHub-Releases w/ release-notes generated from changes between tags',
    python_requires='>=3.10',
    py_modules=modules(),
    packages=packages(),
    package_data={
        'release_notes':['templates/*.mako'],
    },
    install_requires=list(requirements()),
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'github-release = release_notes.cli:main',
        ],
    },
)
