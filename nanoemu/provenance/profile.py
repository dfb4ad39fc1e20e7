"""Timing of pipeline stages.
"""
import contextlib
import time

from nanoemu.log import logger

@contextlib.contextmanager
def report(label):
    """Log the wall clock time spent inside a stage."""
    logger.info("Timing: %s" % label)
    start = time.time()
    try:
        yield None
    finally:
        logger.info("Timing: %s took %d seconds" % (label, int(time.time() - start)))
