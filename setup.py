from pathlib import Path

from setuptools import find_namespace_packages, setup

PROJECT = 'statclust'

try:
    long_description = open('README.adoc', 'rt').read()
except IOError:
    long_description = ''

setup(
    name=PROJECT,
    version=Path('VERSION.txt').read_text().strip(),

    description='Hierarchical and k-means cluster analysis of tabular data',
    long_description=long_description,

    python_requires='>=3.8',
    install_requires=[
        'click',
        'matplotlib',
        'numpy',
        'pandas',
        'scipy',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-benchmark',
        ],
    },

    packages=find_namespace_packages(include=['statclust', 'statclust.*']),
    package_data={'statclust': ['config/*.json']},
    include_package_data=True,

    entry_points={
        'console_scripts': [
            'statclust = statclust.cli:main'
        ],
    },
)
