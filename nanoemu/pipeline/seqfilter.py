"""Length and quality filtering of concatenated reads with seqkit.

https://bioinf.shenwei.me/seqkit/

Filtering is the expensive step, so samples with an existing filtered
output are skipped. A failing sample does not stop the others; failures
are reported together once every sample has been attempted.
"""
import os
import subprocess

from nanoemu import utils
from nanoemu.distributed.transaction import file_transaction
from nanoemu.log import logger
from nanoemu.pipeline import config_utils, sample
from nanoemu.pipeline.errors import DuplicateSampleError, FilterToolError, NoInputError
from nanoemu.provenance import do, profile

# Read length window and minimum average quality for full length 16S reads
MIN_LENGTH = 1200
MAX_LENGTH = 1800
MIN_QUALITY = 10

def filter_samples(in_dir, out_dir, config=None):
    """Filter every concatenated file in in_dir, returning filtered outputs.
    """
    if not os.path.isdir(in_dir):
        raise NoInputError("Input directory for filtering does not exist: %s" % in_dir)
    to_process = _get_filter_targets(in_dir, out_dir)
    utils.safe_makedir(out_dir)
    failures = []
    with profile.report("filter files"):
        for name, in_file, out_file in to_process:
            if os.path.exists(out_file):
                logger.info("Skipping %s - output already exists: %s" % (in_file, out_file))
                continue
            try:
                run_seqkit(in_file, out_file, name, config)
            except (subprocess.CalledProcessError, OSError) as e:
                logger.error("Filtering failed for sample %s: %s" % (name, e))
                failures.append((name, str(e)))
            else:
                logger.info("Processed file: %s" % in_file)
    if failures:
        raise FilterToolError(failures)
    return [out_file for _, _, out_file in to_process]

def _get_filter_targets(in_dir, out_dir):
    """Pair each concatenated input with its filtered output, checking for collisions.
    """
    out = []
    seen = {}
    for in_file in utils.list_files(in_dir, "*" + sample.FRAGMENT_EXT):
        name = sample.filtered_name(in_file)
        if name in seen:
            raise DuplicateSampleError("%s and %s both resolve to filtered sample %s"
                                       % (seen[name], in_file, name))
        seen[name] = in_file
        out.append((name, in_file, sample.filtered_file(out_dir, name)))
    return out

def run_seqkit(in_file, out_file, name, config=None):
    seqkit = config_utils.get_program("seqkit", config or {})
    cmd = [seqkit, "seq", "-g", "-m", MIN_LENGTH, "-M", MAX_LENGTH, "-Q", MIN_QUALITY, in_file]
    with file_transaction(config, out_file) as tx_out_file:
        do.run(cmd, "Filter reads by length and quality", sample=name,
               stdout_file=tx_out_file, checks=[do.file_exists(tx_out_file)])
    return out_file
