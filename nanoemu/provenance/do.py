"""Centralize running of external commands, providing logging and tracking.

Commands are always argument lists and never pass through a shell.
"""
import collections
import os
import subprocess

from nanoemu.log import logger, logger_cl


def run(cmd, descr=None, sample=None, checks=None, log_error=True,
        stdout_file=None, env=None):
    """Run the provided command, logging details and checking for errors.

    stdout_file captures the command's standard output into the given
    file, for tools that write their results to stdout.
    """
    if descr:
        descr = _descr_str(descr, sample)
        logger.debug(descr)
    try:
        logger_cl.debug(" ".join(str(x) for x in cmd))
        _do_run(cmd, checks, stdout_file=stdout_file, env=env)
    except (subprocess.CalledProcessError, OSError):
        if log_error:
            logger.exception("Command failed: %s" % (descr or cmd[0]))
        raise

def _descr_str(descr, sample):
    """Add the sample being processed to the description string.
    """
    if sample:
        descr = "{0} : {1}".format(descr, sample)
    return descr

def _do_run(cmd, checks, stdout_file=None, env=None):
    """Perform running and check results, raising errors for issues.
    """
    cmd = [str(x) for x in cmd]
    out_handle = open(stdout_file, "wb") if stdout_file else None
    try:
        s = subprocess.Popen(
            cmd,
            stdout=out_handle or subprocess.PIPE,
            stderr=subprocess.PIPE if out_handle else subprocess.STDOUT,
            close_fds=True,
            env=env,
        )
        stream = s.stderr if out_handle else s.stdout
        debug_stdout = collections.deque(maxlen=100)
        for raw in stream:
            line = raw.decode("utf-8", errors="replace")
            if line.rstrip():
                debug_stdout.append(line)
                logger.debug(line.rstrip())
        exitcode = s.wait()
        stream.close()
    finally:
        if out_handle:
            out_handle.close()
    if exitcode != 0:
        error_msg = " ".join(cmd)
        error_msg += "\n"
        error_msg += "".join(debug_stdout)
        raise subprocess.CalledProcessError(exitcode, error_msg)
    # Check for problems not identified by shell return codes
    if checks:
        for check in checks:
            if not check():
                raise IOError("External command failed")

# checks for validating run completed successfully

def file_exists(target_file):
    def check():
        ok = os.path.exists(target_file)
        if not ok:
            logger.info("Did not find output file {0}".format(target_file))
        return ok
    return check
