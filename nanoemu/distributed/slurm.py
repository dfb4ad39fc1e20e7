"""Submission of job scripts to the SLURM batch scheduler.

Submission is one way: a JobHandle records what was submitted, and
nothing here waits on or polls the running job.
"""
import collections
import re
import subprocess

from nanoemu.log import logger, logger_cl
from nanoemu.pipeline import config_utils
from nanoemu.pipeline.errors import SubmissionError

JobHandle = collections.namedtuple("JobHandle", ["job_id", "descriptor"])

_SUBMITTED_RE = re.compile(r"Submitted batch job (\d+)")

def check_directive(option, value):
    """sbatch splits directive lines on whitespace, so values cannot contain any.
    """
    if re.search(r"\s", str(value)):
        raise SubmissionError("SLURM directive --%s cannot contain whitespace: %r" % (option, value))
    return value

def directive_lines(directives):
    """Render (option, value) pairs as #SBATCH header lines, skipping unset values.
    """
    return ["#SBATCH --%s=%s" % (k, check_directive(k, v)) for k, v in directives if v is not None]

def submit(descriptor, config=None):
    """Submit a job script with sbatch, returning a handle to the queued job.
    """
    cmd = [config_utils.get_program("sbatch", config or {}), descriptor]
    logger_cl.debug(" ".join(cmd))
    try:
        out = subprocess.check_output(cmd, stderr=subprocess.STDOUT).decode("utf-8", errors="replace")
    except subprocess.CalledProcessError as e:
        raise SubmissionError("Error submitting SLURM job %s (exit code %s): %s"
                              % (descriptor, e.returncode,
                                 (e.output or b"").decode("utf-8", errors="replace").strip()))
    except OSError as e:
        raise SubmissionError("Could not run sbatch to submit %s: %s" % (descriptor, e))
    match = _SUBMITTED_RE.search(out)
    job_id = match.group(1) if match else None
    if job_id:
        logger.info("Submitted SLURM job %s: %s" % (job_id, descriptor))
    else:
        logger.warning("Submitted %s but could not identify a job id in sbatch output: %s"
                       % (descriptor, out.strip()))
    return JobHandle(job_id, descriptor)
