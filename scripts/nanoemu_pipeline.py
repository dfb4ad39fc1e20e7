#!/usr/bin/env python -Es
"""Process a nanopore run directory into Emu taxonomic abundance results.

The run directory holds one folder per sample, named <prefix>_<sample>,
containing compressed read fragments. Reads are concatenated per sample,
length and quality filtered with seqkit, compared with NanoComp, and an
Emu abundance job is submitted to SLURM.

Usage:
  nanoemu_pipeline.py <input_directory> <email>
"""
import sys

from nanoemu.pipeline.main import main

if __name__ == "__main__":
    sys.exit(main())
