#!/usr/bin/env python
# -*- coding: utf-8 -*-
from setuptools import setup, find_packages


deps = {
    'beacon-node': [
        "argcomplete>=1.12.2",
        "eth-utils>=1.9.3",
        "multiaddr>=0.0.9",
        # requests 2.21 is required to support idna 2.8 which is required elsewhere
        "requests>=2.21,<3",
        "termcolor>=1.1.0",
        "toml>=0.10.0,<0.11",
        "typing-extensions>=3.7.4",
    ],
    'test': [
        "hypothesis>=4.45.1",
        "pytest>=5.3.0",
        "pytest-mock>=1.12.1",
        "pytest-timeout>=1.4.2",
        "pytest-xdist>=1.34.0",
    ],
    'lint': [
        "flake8>=3.7.9",
        "flake8-bugbear>=19.8.0",
        "mypy>=0.782",
        "types-requests",
        "types-toml",
    ],
    'dev': [
        "bumpversion>=0.5.3,<1",
        "wheel",
        "setuptools>=36.2.0",
        "tox>=2.7.0",
        "twine",
    ],
}

deps['dev'] = (
    deps['dev'] +
    deps['beacon-node'] +
    deps['test'] +
    deps['lint']
)


install_requires = deps['beacon-node']


with open('./README.md') as readme:
    long_description = readme.read()


setup(
    name='beacon-node',
    # *IMPORTANT*: Don't manually change the version here. Use the 'bumpversion' utility.
    version='0.1.0-alpha.1',
    description='Configuration resolution and datadir lifecycle for an Ethereum 2.0 beacon node',
    long_description=long_description,
    long_description_content_type='text/markdown',
    include_package_data=True,
    python_requires=">=3.7,<4",
    install_requires=install_requires,
    extras_require=deps,
    license='MIT',
    zip_safe=False,
    keywords='ethereum eth2 beacon node configuration',
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Natural Language :: English',
        'Programming Language :: Python :: 3.7',
        'Programming Language :: Python :: 3.8',
    ],
    entry_points={
        'console_scripts': [
            'beacon-node=beacon_node:main',
        ],
    },
)
