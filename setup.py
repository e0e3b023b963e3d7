#!/usr/bin/env python
# -*- coding: utf-8 -*-

from setuptools import setup

with open('README.rst') as readme_file:
    readme = readme_file.read()

with open('HISTORY.rst') as history_file:
    history = history_file.read()

requirements = ['numpy']

test_requirements = ['pytest>=3', ]

setup(
    author="PolyChord developers",
    python_requires='>=3.6',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: GNU General Public License v3 (GPLv3)',
        'Natural Language :: English',
        'Programming Language :: Python :: 3',
    ],
    description="Python interface to the PolyChord nested sampling engine.",
    install_requires=requirements,
    extras_require={'test': test_requirements},
    license="GNU General Public License v3",
    long_description=readme + '\n\n' + history,
    include_package_data=True,
    keywords='pypolychord polychord nested sampling',
    name='pypolychord',
    packages=['pypolychord'],
    test_suite='tests',
    tests_require=test_requirements,
    version='1.0.0',
    zip_safe=False,
)
