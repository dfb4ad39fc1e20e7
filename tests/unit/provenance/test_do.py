import subprocess
import sys

import pytest

from nanoemu.provenance import do


def test_captures_stdout_to_file(tmpdir):
    out_file = str(tmpdir.join("out.txt"))
    do.run([sys.executable, "-c", "print('ACGT')"], "write reads", stdout_file=out_file)
    with open(out_file) as in_handle:
        assert in_handle.read() == "ACGT\n"


def test_failure_raises_with_output(tmpdir):
    cmd = [sys.executable, "-c", "import sys; sys.stderr.write('bad input\\n'); sys.exit(2)"]
    with pytest.raises(subprocess.CalledProcessError) as excinfo:
        do.run(cmd, log_error=False)
    assert excinfo.value.returncode == 2
    assert "bad input" in excinfo.value.cmd


def test_failing_check_raises(tmpdir):
    missing = str(tmpdir.join("missing.txt"))
    with pytest.raises(IOError):
        do.run([sys.executable, "-c", "pass"], checks=[do.file_exists(missing)], log_error=False)


def test_missing_program_raises_oserror():
    with pytest.raises(OSError):
        do.run(["nanoemu-no-such-program"], log_error=False)
