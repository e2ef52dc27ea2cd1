#!/usr/bin/env python3

# Copyright (c) 2009 Giampaolo Rodola'. All rights reserved.
# Use of this source code is governed by a BSD-style license that can be
# found in the LICENSE file.

"""Parser for the Linux /proc/[pid]/smaps file."""

import ast
import os

from setuptools import setup

HERE = os.path.abspath(os.path.dirname(__file__))

# Test deps, installable via `pip install .[test]`.
TEST_DEPS = [
    "pytest",
    "pytest-xdist",
]

# Development deps, installable via `pip install .[dev]`.
DEV_DEPS = TEST_DEPS + [
    "black",
    "check-manifest",
    "coverage",
    "pytest-cov",
    "rstcheck",
    "ruff",
    "twine",
    "wheel",
]


def get_version():
    INIT = os.path.join(HERE, 'procsmaps/__init__.py')
    with open(INIT) as f:
        for line in f:
            if line.startswith('__version__'):
                ret = ast.literal_eval(line.strip().split(' = ')[1])
                assert ret.count('.') == 2, ret
                for num in ret.split('.'):
                    assert num.isdigit(), ret
                return ret
        msg = "couldn't find version string"
        raise ValueError(msg)


VERSION = get_version()


def get_long_description():
    with open(os.path.join(HERE, 'README.rst')) as f:
        return f.read()


def main():
    kwargs = dict(
        name='procsmaps',
        version=VERSION,
        description="Parser for the Linux /proc/[pid]/smaps file.",
        long_description=get_long_description(),
        long_description_content_type='text/x-rst',
        # fmt: off
        keywords=[
            'smaps', 'proc', 'procfs', 'pmap', 'smem', 'pss', 'uss', 'rss',
            'swap', 'memory', 'mappings', 'monitoring', 'linux',
        ],
        # fmt: on
        author='Giampaolo Rodola',
        author_email='g.rodola@gmail.com',
        platforms='Linux',
        license='BSD-3-Clause',
        packages=['procsmaps', 'procsmaps.tests'],
        package_data={'procsmaps.tests': ['fixtures/*']},
        python_requires=">=3.7",
        extras_require={
            "dev": DEV_DEPS,
            "test": TEST_DEPS,
        },
        zip_safe=False,
        classifiers=[
            'Development Status :: 5 - Production/Stable',
            'Environment :: Console',
            'Intended Audience :: Developers',
            'Intended Audience :: System Administrators',
            'Operating System :: POSIX :: Linux',
            'Programming Language :: Python :: 3',
            'Programming Language :: Python :: Implementation :: CPython',
            'Programming Language :: Python :: Implementation :: PyPy',
            'Programming Language :: Python',
            'Topic :: Software Development :: Libraries :: Python Modules',
            'Topic :: System :: Monitoring',
            'Topic :: System :: Operating System',
            'Topic :: Utilities',
        ],
    )
    setup(**kwargs)


if __name__ == '__main__':
    main()
