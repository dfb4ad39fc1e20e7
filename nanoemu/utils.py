"""Helpful utilities for building analysis pipelines.
"""
import fnmatch
import os
import shutil
import time


def safe_makedir(dname):
    """Make a directory if it doesn't exist, handling concurrent race conditions.
    """
    if not dname:
        return dname
    num_tries = 0
    max_tries = 5
    while not os.path.exists(dname):
        # we could get an error here if multiple processes are creating
        # the directory at the same time. Grr, concurrency.
        try:
            os.makedirs(dname)
        except OSError:
            if num_tries > max_tries:
                raise
            num_tries += 1
            time.sleep(2)
    return dname

def get_size(path):
    """ Returns the size in bytes if `path` is a file,
        or the size of all files in `path` if it's a directory.
    """
    if os.path.isfile(path):
        return os.path.getsize(path)
    return sum(get_size(os.path.join(path, f)) for f in os.listdir(path))

def get_abspath(path, pardir=None):
    if pardir is None:
        pardir = os.getcwd()
    path = os.path.expandvars(os.path.expanduser(path))
    return os.path.normpath(os.path.join(pardir, path))

def remove_safe(f):
    try:
        if os.path.isdir(f):
            shutil.rmtree(f)
        else:
            os.remove(f)
    except OSError:
        pass

def locate(pattern, root=os.curdir):
    """Locate all files matching supplied filename pattern recursively.

    Results are sorted by path, so repeated calls on an unchanged tree
    return the same order.
    """
    out = []
    for path, dirs, files in os.walk(os.path.abspath(root)):
        dirs.sort()
        for filename in fnmatch.filter(sorted(files), pattern):
            out.append(os.path.join(path, filename))
    return out

def list_files(dname, pattern):
    """Files directly inside a directory matching a pattern, in listing order.
    """
    return [os.path.join(dname, f) for f in sorted(os.listdir(dname))
            if fnmatch.fnmatch(f, pattern) and os.path.isfile(os.path.join(dname, f))]
