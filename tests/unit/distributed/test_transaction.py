import os

import pytest

from nanoemu.distributed.transaction import file_transaction, tx_tmpdir


def test_output_moved_into_place_on_success(tmpdir):
    out_file = str(tmpdir.join("out", "result.txt"))
    with file_transaction(out_file) as tx_out_file:
        assert tx_out_file != out_file
        with open(tx_out_file, "w") as out_handle:
            out_handle.write("done")
    with open(out_file) as in_handle:
        assert in_handle.read() == "done"
    assert os.listdir(str(tmpdir.join("out"))) == ["result.txt"]


def test_failure_leaves_no_partial_output(tmpdir):
    out_file = str(tmpdir.join("result.txt"))
    with pytest.raises(RuntimeError):
        with file_transaction(None, out_file) as tx_out_file:
            with open(tx_out_file, "w") as out_handle:
                out_handle.write("half")
            raise RuntimeError("interrupted")
    assert not os.path.exists(out_file)
    assert os.listdir(str(tmpdir)) == []


def test_multiple_files(tmpdir):
    out_files = [str(tmpdir.join("a.txt")), str(tmpdir.join("b.txt"))]
    with file_transaction({}, *out_files) as tx_files:
        for tx_file in tx_files:
            with open(tx_file, "w") as out_handle:
                out_handle.write("x")
    assert all(os.path.exists(x) for x in out_files)


def test_configured_temporary_directory(tmpdir):
    config = {"resources": {"tmp": {"dir": str(tmpdir.join("scratch"))}}}
    with tx_tmpdir(config, str(tmpdir)) as tmp_dir:
        assert tmp_dir.startswith(str(tmpdir.join("scratch")))
    assert not os.path.exists(tmp_dir)
