"""Main entry point for the nanopore 16S abundance pipeline.

Runs the stages in a fixed order, each reading the previous stage's
output directory inside the run root:

    <root>/<prefix>_<sample>/*.fastq.gz  -> concat_fastqpass/
    concat_fastqpass/                    -> seqfiltered/
    seqfiltered/                         -> nanocomp_output/, emu_results/
"""
import argparse
import os
import sys

from nanoemu import log
from nanoemu.distributed import slurm
from nanoemu.log import logger
from nanoemu.pipeline import concat, config_utils, sample, seqfilter, version
from nanoemu.pipeline.errors import PipelineError
from nanoemu.qc import nanocomp
from nanoemu.taxonomy import emu

def run_main(input_dir, email, config=None, config_file=None):
    """Run all stages on a run root, returning the samples, directories and submitted job.

    Without a loaded config, reads config_file or the default system
    configuration. Sample discovery happens before any output directory
    is created.
    """
    if config is None:
        config, _ = config_utils.load_system_config(config_file, work_dir=input_dir)
    emu.check_email(email)
    input_dir = os.path.abspath(input_dir)
    dirs = setup_directories(input_dir)
    slurm.check_directive("chdir", dirs["emu"])
    samples = sample.discover_samples(input_dir)
    logger.info("Found %s samples: %s" % (len(samples), ", ".join(x.name for x in samples)))
    concat.concatenate_samples(samples, dirs["concat"], config)
    seqfilter.filter_samples(dirs["concat"], dirs["filtered"], config)
    nanocomp.run(dirs["filtered"], dirs["nanocomp"], config)
    job = emu.run(dirs["filtered"], dirs["emu"], email, config)
    return {"samples": samples, "dirs": dirs, "job": job}

def setup_directories(input_dir):
    """Output directory for each stage; stages create them on first write.
    """
    return dict((k, os.path.join(input_dir, v)) for k, v in sample.STAGE_DIRS.items())

def parse_cl_args(in_args):
    """Parse input commandline arguments: a run directory and a notification email.
    """
    description = "Concatenate, filter, report and submit Emu abundance for nanopore reads."
    usage = "%(prog)s [--] <input_directory> <email>"
    parser = argparse.ArgumentParser(prog="nanoemu_pipeline.py", usage=usage,
                                     description=description, add_help=False)
    parser.add_argument("input_dir",
                        help="Run directory containing <prefix>_<sample> folders of fastq.gz files")
    parser.add_argument("email", help="Email address for SLURM job notifications")
    args = parser.parse_args(in_args)
    try:
        emu.check_email(args.email)
    except ValueError as e:
        parser.error(str(e))
    return {"input_dir": args.input_dir, "email": args.email}

def main(in_args=None):
    kwargs = parse_cl_args(sys.argv[1:] if in_args is None else in_args)
    config, config_file = config_utils.load_system_config(work_dir=os.path.abspath(kwargs["input_dir"]))
    handler = log.setup_local_logging(config)
    try:
        logger.info("nanoemu version %s" % version.__version__)
        if config_file:
            logger.info("System YAML configuration: %s" % os.path.abspath(config_file))
        out = run_main(config=config, **kwargs)
        if out["job"].job_id:
            logger.info("Emu abundance submitted as SLURM job %s" % out["job"].job_id)
    except PipelineError as e:
        logger.error(str(e))
        return 1
    finally:
        handler.pop_application()
        handler.close()
    return 0
