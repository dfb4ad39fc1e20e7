"""High level code for driving the nanopore abundance pipeline.

Processing runs as a fixed, linear sequence of stages:

  - sample.py: Discover samples from per-sample read directories.
  - concat.py: Concatenate read fragments into one file per sample.
  - seqfilter.py: Length and quality filtering with seqkit.
  - qc/nanocomp.py: Comparative quality report across all samples.
  - taxonomy/emu.py: Emu abundance estimation submitted as a SLURM job.

main.py ties the stages together and provides the command line entry point.
"""
