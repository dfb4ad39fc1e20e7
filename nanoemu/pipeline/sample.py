"""Discover samples from a directory of per-sample read folders.

A run root holds one folder per sample, named `<prefix>_<sample>`, each
with compressed read fragments:

    run1/run1_S1/a.fastq.gz
    run1/run1_S1/b.fastq.gz
    run1/run1_S2/c.fastq.gz

Identifiers are extracted and validated here once, and the file naming
helpers below carry them through the later stages.
"""
import collections
import os
import re

from nanoemu import utils
from nanoemu.log import logger
from nanoemu.pipeline.errors import DiscoveryError, DuplicateSampleError

FRAGMENT_EXT = ".fastq.gz"
CONCAT_PREFIX = "concatenated_"
FILTERED_EXT = ".fastq"

# Output directories written inside the run root, in stage order
STAGE_DIRS = collections.OrderedDict([
    ("concat", "concat_fastqpass"),
    ("filtered", "seqfiltered"),
    ("nanocomp", "nanocomp_output"),
    ("emu", "emu_results"),
])

Sample = collections.namedtuple("Sample", ["name", "directory", "fragments"])

_SAMPLE_RE = re.compile(r"^[A-Za-z0-9.-]+$")
_SAMPLE_DIR_RE = re.compile(r"^([^_]+)_.+")

def discover_samples(root):
    """Retrieve samples from sibling `<prefix>_*` folders in a run root.

    The prefix of the first matching folder in listing order is used for
    the whole run.
    """
    if not os.path.isdir(root):
        raise DiscoveryError("Input directory does not exist: %s" % root)
    candidates = [x for x in sorted(os.listdir(root))
                  if os.path.isdir(os.path.join(root, x)) and x not in STAGE_DIRS.values()
                  and _SAMPLE_DIR_RE.match(x)]
    if not candidates:
        raise DiscoveryError("No sample directories matching <prefix>_<sample> found in %s" % root)
    prefix = _SAMPLE_DIR_RE.match(candidates[0]).group(1)
    logger.info("Base prefix identified: %s" % prefix)
    samples = []
    seen = {}
    for dname in candidates:
        if not dname.startswith(prefix + "_"):
            continue
        name = check_sample_name(dname.split("_")[-1], dname)
        if name in seen:
            raise DuplicateSampleError("Directories %s and %s both resolve to sample %s"
                                       % (seen[name], dname, name))
        seen[name] = dname
        sample_dir = os.path.join(root, dname)
        samples.append(Sample(name, sample_dir, utils.list_files(sample_dir, "*" + FRAGMENT_EXT)))
    return samples

def check_sample_name(name, source):
    if not name or not _SAMPLE_RE.match(name):
        raise DiscoveryError("Invalid sample identifier %r derived from %s" % (name, source))
    return name

# ## File naming between stages

def concat_file(out_dir, name):
    return os.path.join(out_dir, "%s%s%s" % (CONCAT_PREFIX, name, FRAGMENT_EXT))

def name_from_concat(fname):
    """Sample token from a concatenated file, `concatenated_S1.fastq.gz` -> S1.
    """
    base = os.path.basename(fname)
    if base.endswith(FRAGMENT_EXT):
        base = base[:-len(FRAGMENT_EXT)]
    if base.startswith(CONCAT_PREFIX):
        base = base[len(CONCAT_PREFIX):]
    return check_sample_name(base, fname)

def filtered_name(fname):
    """Identifier used for filtered output: the digits of the sample token.

    Tokens without any digits are kept whole.
    """
    token = name_from_concat(fname)
    digits = "".join(c for c in token if c.isdigit())
    if not digits:
        logger.warning("No digits in sample %s, using full identifier for filtered output" % token)
        return token
    return digits

def filtered_file(out_dir, name):
    return os.path.join(out_dir, "%s%s" % (name, FILTERED_EXT))

def label_from_filtered(fname):
    """Human readable label for a filtered file, its name without extension.
    """
    base = os.path.basename(fname)
    return base[:-len(FILTERED_EXT)] if base.endswith(FILTERED_EXT) else base
