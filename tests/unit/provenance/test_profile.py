import pytest

from nanoemu.provenance import profile


def test_timing_logged_for_completed_stage(mocker):
    logger = mocker.patch("nanoemu.provenance.profile.logger")
    with profile.report("concatenate"):
        pass
    messages = [c[0][0] for c in logger.info.call_args_list]
    assert messages[0] == "Timing: concatenate"
    assert messages[1].startswith("Timing: concatenate took")


def test_timing_logged_when_stage_fails(mocker):
    logger = mocker.patch("nanoemu.provenance.profile.logger")
    with pytest.raises(RuntimeError):
        with profile.report("filter"):
            raise RuntimeError("seqkit failed")
    assert logger.info.call_args[0][0].startswith("Timing: filter took")
