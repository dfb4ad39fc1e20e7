"""Combine read fragments for each sample into a single file.

Fragments are gzip members, so byte level concatenation gives a valid
gzip file without recompressing. Outputs are always regenerated; this
is cheap compared to filtering and keeps results in step with the inputs.
"""
import shutil

from nanoemu import utils
from nanoemu.distributed.transaction import file_transaction
from nanoemu.log import logger
from nanoemu.pipeline import sample
from nanoemu.pipeline.errors import AggregationError
from nanoemu.provenance import profile

def concatenate_samples(samples, out_dir, config=None):
    """Write one concatenated file per sample, returning the output files.

    Fails on the first unreadable fragment.
    """
    utils.safe_makedir(out_dir)
    out_files = []
    with profile.report("concatenate files"):
        for cur in samples:
            out_files.append(concatenate_sample(cur, out_dir, config))
            logger.info("Processed directory: %s" % cur.directory)
    return out_files

def concatenate_sample(cur, out_dir, config=None):
    out_file = sample.concat_file(out_dir, cur.name)
    if not cur.fragments:
        logger.warning("No %s files found for sample %s in %s, writing empty output"
                       % (sample.FRAGMENT_EXT, cur.name, cur.directory))
    with file_transaction(config, out_file) as tx_out_file:
        with open(tx_out_file, "wb") as out_handle:
            for fragment in cur.fragments:
                try:
                    with open(fragment, "rb") as in_handle:
                        shutil.copyfileobj(in_handle, out_handle)
                except (IOError, OSError) as e:
                    raise AggregationError(cur.name, "Could not read fragment %s: %s" % (fragment, e))
    return out_file
