#!/usr/bin/env python

"""Setup file and install script for the nanopore Emu abundance pipeline"""

import os
import subprocess

import setuptools

VERSION = '0.1.0'

# add version number and git commit hash of the current revision to version.py
try:
    git_run = subprocess.run(['git', 'rev-parse', '--short', 'HEAD'], stdout=subprocess.PIPE,
                             stderr=subprocess.DEVNULL)
    git_run.check_returncode()
except (subprocess.SubprocessError, OSError):
    commit_hash = ''
else:
    commit_hash = git_run.stdout.strip().decode()

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, 'nanoemu', 'pipeline', 'version.py'), 'w') as version_file:
    version_file.writelines([f'__version__ = "{VERSION}"\n',
                             f'__git_revision__ = "{commit_hash}"\n'])

# seqkit, NanoComp, emu and SLURM are external programs installed via Conda
# or the cluster environment, not Python dependencies
setuptools.setup(name='nanoemu',
                 version=VERSION,
                 description='Nanopore 16S read processing and Emu abundance job submission',
                 packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
                 scripts=['scripts/nanoemu_pipeline.py'],
                 entry_points={'console_scripts': ['nanoemu = nanoemu.pipeline.main:main']},
                 python_requires='>=3.7',
                 install_requires=['logbook', 'toolz', 'PyYAML'],
                 extras_require={'test': ['pytest', 'pytest-mock']})
