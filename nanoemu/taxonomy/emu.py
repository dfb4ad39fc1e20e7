"""Taxonomic abundance estimation with Emu, run as a SLURM batch job.

https://github.com/treangenlab/emu

The job script loops over the filtered reads when the job runs, not when
it is written, so it picks up whatever is in the filtered directory at
that point.
"""
import collections
import os
import re
import shlex

from nanoemu import utils
from nanoemu.distributed import slurm
from nanoemu.distributed.transaction import file_transaction
from nanoemu.log import logger
from nanoemu.pipeline import config_utils, sample

JOB_NAME = "emu_abundance"
DESCRIPTOR = "%s.slurm" % JOB_NAME

# A variable assigned inside the job script, expanded when the job runs
ShellVar = collections.namedtuple("ShellVar", ["name"])

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")

def check_email(email):
    if not email or not _EMAIL_RE.match(email):
        raise ValueError("Invalid notification email address: %r" % email)
    return email

def run(in_dir, out_dir, email, config):
    """Write the Emu job script into out_dir and submit it.

    Returns the slurm.JobHandle of the queued job.
    """
    descriptor = write_descriptor(in_dir, out_dir, email, config)
    return slurm.submit(descriptor, config)

def write_descriptor(in_dir, out_dir, email, config):
    """Render the job script, replacing any previous one in out_dir.
    """
    in_dir = os.path.abspath(in_dir)
    out_dir = os.path.abspath(utils.safe_makedir(out_dir))
    out_file = os.path.join(out_dir, DESCRIPTOR)
    with file_transaction(config, out_file) as tx_out_file:
        with open(tx_out_file, "w") as out_handle:
            out_handle.write(render(in_dir, out_dir, email, config))
        os.chmod(tx_out_file, 0o755)
    logger.info("Wrote Emu job script: %s" % out_file)
    return out_file

def render(in_dir, out_dir, email, config):
    resources = config_utils.get_resources("emu", config)
    directives = [("job-name", JOB_NAME),
                  ("error", "%s.%%j.err" % JOB_NAME),
                  ("ntasks", 1),
                  ("cpus-per-task", resources.get("cores", 8)),
                  ("mem", resources.get("memory", "16G")),
                  ("nodelist", resources.get("node")),
                  ("mail-user", check_email(email)),
                  ("mail-type", "END,FAIL"),
                  ("chdir", out_dir)]
    present = []
    if os.path.isdir(in_dir):
        present = [sample.label_from_filtered(x)
                   for x in utils.list_files(in_dir, "*" + sample.FILTERED_EXT)]
    return _JOB_TEMPLATE % {"directives": "\n".join(slurm.directive_lines(directives)),
                            "in_glob": "%s/*%s" % (shlex.quote(in_dir), sample.FILTERED_EXT),
                            "ext": sample.FILTERED_EXT,
                            "emu_cmd": format_cmd(emu_cmd(out_dir, config)),
                            "samples": " ".join(present) or "none"}

def emu_cmd(out_dir, config):
    """Argument list for one Emu run; the input file and sample name come from the loop.
    """
    resources = config_utils.get_resources("emu", config)
    env = resources.get("env")
    cmd = config_utils.conda_run_cmd(env, config) if env else []
    cmd += [config_utils.get_program("emu", config), "abundance", ShellVar("file"),
            "--keep-counts", "--keep-read-assignments",
            "--threads", resources.get("cores", 8),
            "--db", config_utils.expand_path(resources.get("db")),
            "--output-unclassified",
            "--output-dir", out_dir,
            "--output-basename", ShellVar("sample_id")]
    return cmd

def format_cmd(cmd):
    """Quote an argument list for bash, leaving loop variables to expand at run time.
    """
    return " ".join('"$%s"' % x.name if isinstance(x, ShellVar) else shlex.quote(str(x))
                    for x in cmd)

_JOB_TEMPLATE = """#!/bin/bash
%(directives)s

# Samples present when written: %(samples)s

start_time=$(date +%%s)

for file in %(in_glob)s; do
    if [ -f "$file" ]; then
        sample_id=$(basename "$file" %(ext)s)
        %(emu_cmd)s
        echo "Processed file: $file"
    fi
done

end_time=$(date +%%s)
echo "Run emu abundance took $((end_time - start_time)) seconds."
"""
