#!/usr/bin/env python
from pathlib import Path

from setuptools import find_packages, setup

DEPENDENCIES = {
    'geojson': [],
    'humanize': [],
    'numpy': [],
    'pandas': ['numpy'],
    'pyproj': [],
    'python-dateutil': [],
    'pyyaml': [],
    'typepigeon<2': [],
    'typer': [],
}

README = Path(__file__).parent / 'README.md'

setup(
    name='wsprtrack',
    version='0.1.0',
    author='wsprtrack developers',
    description='reconstruct the tracks of WSPR telemetry trackers from raw spot reports',
    long_description=README.read_text() if README.exists() else '',
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=('tests',)),
    python_requires='>=3.8',
    setup_requires=['setuptools>=41.2'],
    install_requires=list(DEPENDENCIES),
    extras_require={
        'testing': ['pytest', 'pytest-cov', 'pytest-xdist'],
        'development': ['flake8', 'isort', 'oitnb', 'wheel'],
    },
    entry_points={'console_scripts': ['wsprtrack=wsprtrack.__main__:main']},
)
