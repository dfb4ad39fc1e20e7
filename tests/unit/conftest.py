"""Shared fixtures for unit tests: run directories and system configuration."""
import os

import pytest

from nanoemu.pipeline import config_utils


def write_file(fname, content=b""):
    d = os.path.dirname(fname)
    if not os.path.exists(d):
        os.makedirs(d)
    with open(fname, "wb") as out_handle:
        out_handle.write(content)
    return fname


@pytest.fixture
def run_root(tmpdir):
    """Run directory with two samples, S1 split over two fragments."""
    root = str(tmpdir.join("run1"))
    write_file(os.path.join(root, "run1_S1", "a.fastq.gz"), b"AAAA")
    write_file(os.path.join(root, "run1_S1", "b.fastq.gz"), b"BBBB")
    write_file(os.path.join(root, "run1_S2", "c.fastq.gz"), b"CCCC")
    return root


@pytest.fixture
def conda_dir(tmpdir):
    d = str(tmpdir.join("miniconda3"))
    write_file(os.path.join(d, "etc", "profile.d", "conda.sh"), b"# conda\n")
    return d


@pytest.fixture
def config(conda_dir):
    return config_utils.merge_config(config_utils.DEFAULTS,
                                     {"resources": {"conda": {"dir": conda_dir}}})


@pytest.fixture
def fake_seqkit(mocker):
    """Stand in for external tool runs.

    Runs capturing stdout (seqkit) get a small filtered file per input.
    """
    def _run(cmd, descr=None, sample=None, checks=None, stdout_file=None, **kwargs):
        if stdout_file:
            with open(stdout_file, "wb") as out_handle:
                out_handle.write(("filtered:%s" % os.path.basename(cmd[-1])).encode())
    return mocker.patch("nanoemu.provenance.do.run", side_effect=_run)
