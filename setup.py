#!/usr/bin/env python

from setuptools import setup

setup(
    name='termsvg',
    version='0.1.0',
    license='BSD 3-clause license',
    description='Convert terminal recordings to SVG animations',
    long_description='A converter written in Python which replays '
                     'asciicast recordings of terminal sessions through a '
                     'terminal emulator and renders them as standalone SVG '
                     'animations.',
    classifiers=[
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: BSD License',
        'Operating System :: OS Independent',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Topic :: Multimedia :: Graphics',
        'Topic :: Terminals'
    ],
    python_requires='>=3.8',
    packages=[
        'termsvg',
        'termsvg.tests'
    ],
    package_data={
        'termsvg': ['data/*.ini'],
    },
    scripts=['scripts/termsvg'],
    include_package_data=True,
    install_requires=[
        'lxml',
        'wcwidth',
    ],
    extras_require={
        'dev': [
            'coverage',
            'pylint',
            'twine',
            'wheel',
        ]
    }
)
