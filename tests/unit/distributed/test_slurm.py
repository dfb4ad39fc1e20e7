import subprocess

import pytest

from nanoemu.distributed import slurm
from nanoemu.pipeline.errors import SubmissionError


def test_submit_returns_job_handle(mocker):
    check_output = mocker.patch("nanoemu.distributed.slurm.subprocess.check_output",
                                return_value=b"Submitted batch job 12345\n")
    job = slurm.submit("/work/emu_results/emu_abundance.slurm")
    assert job == slurm.JobHandle("12345", "/work/emu_results/emu_abundance.slurm")
    assert check_output.call_args[0][0] == ["sbatch", "/work/emu_results/emu_abundance.slurm"]


def test_submit_uses_configured_sbatch(mocker):
    check_output = mocker.patch("nanoemu.distributed.slurm.subprocess.check_output",
                                return_value=b"Submitted batch job 7\n")
    slurm.submit("job.slurm", {"resources": {"sbatch": {"cmd": "/usr/local/bin/sbatch"}}})
    assert check_output.call_args[0][0][0] == "/usr/local/bin/sbatch"


def test_unrecognized_output_still_succeeds(mocker):
    mocker.patch("nanoemu.distributed.slurm.subprocess.check_output", return_value=b"queued\n")
    assert slurm.submit("job.slurm").job_id is None


def test_rejected_job_raises(mocker):
    mocker.patch("nanoemu.distributed.slurm.subprocess.check_output",
                 side_effect=subprocess.CalledProcessError(1, "sbatch", output=b"invalid partition"))
    with pytest.raises(SubmissionError) as excinfo:
        slurm.submit("job.slurm")
    assert "invalid partition" in str(excinfo.value)


def test_missing_sbatch_raises(mocker):
    mocker.patch("nanoemu.distributed.slurm.subprocess.check_output",
                 side_effect=OSError("No such file or directory: 'sbatch'"))
    with pytest.raises(SubmissionError):
        slurm.submit("job.slurm")


def test_directive_lines_skip_unset_values():
    assert slurm.directive_lines([("ntasks", 1), ("nodelist", None)]) == ["#SBATCH --ntasks=1"]


def test_directive_with_whitespace_rejected():
    assert slurm.check_directive("chdir", "/work/emu_results") == "/work/emu_results"
    with pytest.raises(SubmissionError):
        slurm.directive_lines([("chdir", "/work/run one/emu_results")])
