"""Comparative read quality report across samples with NanoComp.

https://github.com/wdecoster/nanocomp

All filtered samples go into a single NanoComp call so the report
compares them side by side. NanoComp runs inside its own conda
environment via `conda run`.
"""
import json
import os
import subprocess

from nanoemu import utils
from nanoemu.distributed.transaction import DEFAULT_TMP
from nanoemu.log import logger, logger_cl
from nanoemu.pipeline import config_utils, sample
from nanoemu.pipeline.errors import (DiscoveryInvariantError, NoInputError,
                                     ReportError, ToolEnvironmentError)
from nanoemu.provenance import do, profile

def run(in_dir, out_dir, config):
    """Generate a NanoComp report for all filtered files in in_dir.

    Validates inputs and the conda environment before any output is written.
    """
    if not os.path.isdir(in_dir):
        raise NoInputError("Input directory '%s' does not exist" % in_dir)
    fastq_files = find_filtered_files(in_dir)
    names = get_names(fastq_files)
    _check_inputs(in_dir, fastq_files, names)
    env = check_environment(config)
    for i, (fname, name) in enumerate(zip(fastq_files, names)):
        logger.debug("Report input %s: %s as %s" % (i + 1, fname, name))
    utils.safe_makedir(out_dir)
    cmd = _nanocomp_cmd(fastq_files, names, out_dir, env, config)
    with profile.report("NanoComp report"):
        try:
            do.run(cmd, "Comparative quality report with NanoComp")
        except subprocess.CalledProcessError as e:
            raise ReportError("NanoComp failed with exit code %s" % e.returncode)
        except OSError as e:
            raise ToolEnvironmentError("Could not run NanoComp: %s" % e)
    logger.info("NanoComp output written to %s" % out_dir)
    return out_dir

def find_filtered_files(in_dir):
    """All filtered fastq files below in_dir, ignoring unfinished transactions.
    """
    return [x for x in utils.locate("*" + sample.FILTERED_EXT, in_dir)
            if DEFAULT_TMP not in os.path.relpath(x, in_dir).split(os.sep)]

def get_names(fastq_files):
    return [sample.label_from_filtered(x) for x in fastq_files]

def _check_inputs(in_dir, fastq_files, names):
    if len(fastq_files) == 0:
        raise NoInputError("No %s files found in %s" % (sample.FILTERED_EXT, in_dir))
    if len(fastq_files) != len(names):
        raise DiscoveryInvariantError("Mismatch between number of files (%s) and names (%s)"
                                      % (len(fastq_files), len(names)))

def check_environment(config):
    """Ensure the conda installation and NanoComp environment are present.

    Returns the environment to run in, or None when NanoComp is configured
    to run directly from the PATH.
    """
    env = config_utils.get_resources("nanocomp", config).get("env")
    if not env:
        return None
    profile_script = config_utils.get_conda_profile(config)
    if not os.path.exists(profile_script):
        raise ToolEnvironmentError("Conda installation not found: %s" % profile_script)
    if env not in _conda_envs(config):
        raise ToolEnvironmentError("conda environment '%s' not found" % env)
    return env

def _conda_envs(config):
    """Names and prefixes of the available conda environments.
    """
    cmd = [config_utils.get_conda_cmd(config), "env", "list", "--json"]
    logger_cl.debug(" ".join(cmd))
    try:
        out = subprocess.check_output(cmd)
        prefixes = json.loads(out.decode("utf-8"))["envs"]
    except (subprocess.CalledProcessError, OSError, ValueError, KeyError) as e:
        raise ToolEnvironmentError("Could not list conda environments: %s" % e)
    return set(prefixes) | set(os.path.basename(x) for x in prefixes)

def _nanocomp_cmd(fastq_files, names, out_dir, env, config):
    cmd = config_utils.conda_run_cmd(env, config) if env else []
    cmd += [config_utils.get_program("nanocomp", config), "--fastq"] + list(fastq_files)
    cmd += ["--names"] + list(names)
    cmd += ["-o", out_dir]
    return cmd
