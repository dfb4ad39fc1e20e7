"""Handle file based transactions allowing safe restarts at any point.

To handle interrupts, output files are written to temporary locations
during processing and moved to the final location when finished. This
ensures output files will be complete independent of method of
interruption, which the skip-if-present checks in later runs rely on.
"""
import contextlib
import os
import shutil
import tempfile

import toolz as tz

from nanoemu import utils


DEFAULT_TMP = "nanoemutx"


@contextlib.contextmanager
def tx_tmpdir(config=None, base_dir=None):
    """Context manager to create and remove a transactional temporary directory.

    Uses the configured temporary directory if present, otherwise
    a `nanoemutx` directory inside base_dir (or the current directory).
    """
    base_dir = base_dir or os.getcwd()
    tmpdir_base = utils.get_abspath(_get_base_tmpdir(config, base_dir))
    utils.safe_makedir(tmpdir_base)
    tmp_dir = tempfile.mkdtemp(dir=tmpdir_base)
    try:
        yield tmp_dir
    finally:
        utils.remove_safe(tmp_dir)
        _remove_if_empty(tmpdir_base)


def _remove_if_empty(dname):
    if os.path.basename(dname) == DEFAULT_TMP:
        try:
            os.rmdir(dname)
        except OSError:
            pass


def _get_base_tmpdir(config, fallback_base_dir):
    config_tmpdir = tz.get_in(("resources", "tmp", "dir"), config)
    return config_tmpdir or os.path.join(fallback_base_dir, DEFAULT_TMP)


@contextlib.contextmanager
def file_transaction(*config_and_files):
    """Wrap file generation in a transaction, moving to output if finishes.

    The initial argument can be the system `config` dictionary, used to
    identify a configured location for temporary files.
    """
    config, orig_names = _get_args(config_and_files)
    base_dir = os.path.dirname(os.path.abspath(orig_names[0]))
    with tx_tmpdir(config, base_dir) as tmpdir:
        safe_names = [os.path.join(tmpdir, os.path.basename(f)) for f in orig_names]
        if len(safe_names) == 1:
            yield safe_names[0]
        else:
            yield tuple(safe_names)
        for safe, orig in zip(safe_names, orig_names):
            if os.path.exists(safe):
                _move_file_with_sizecheck(safe, orig)


def _move_file_with_sizecheck(tx_file, final_file):
    """Move transaction file to final location, with size checks avoiding
    failed transfers.
    """
    utils.safe_makedir(os.path.dirname(final_file))
    want_size = utils.get_size(tx_file)
    shutil.move(tx_file, final_file)
    transfer_size = utils.get_size(final_file)

    assert want_size == transfer_size, (
        'distributed.transaction.file_transaction: File copy error: '
        'file on temporary storage ({}) size {} bytes does not equal size '
        'of file after transfer ({}) size {} bytes'.format(
            tx_file, want_size, final_file, transfer_size)
    )


def _get_args(config_and_files):
    if config_and_files[0] is None or isinstance(config_and_files[0], dict):
        return config_and_files[0], list(config_and_files[1:])
    return None, list(config_and_files)
