
import pytest

from nanoemu.pipeline import config_utils


def test_defaults_without_system_file(tmpdir, monkeypatch):
    monkeypatch.chdir(str(tmpdir))
    config, config_file = config_utils.load_system_config(work_dir=str(tmpdir))
    assert config_file is None
    assert config_utils.get_program("seqkit", config) == "seqkit"
    assert config_utils.get_resources("nanocomp", config)["env"] == "nanocomp_env"


def test_system_file_in_run_root_merges_over_defaults(tmpdir, monkeypatch):
    cwd = tmpdir.mkdir("cwd")
    monkeypatch.chdir(str(cwd))
    root = tmpdir.mkdir("run1")
    root.join("nanoemu_system.yaml").write(
        "resources:\n  emu:\n    node: node05\n  seqkit: /opt/seqkit/bin/seqkit\n")
    config, config_file = config_utils.load_system_config(work_dir=str(root))
    assert config_file == str(root.join("nanoemu_system.yaml"))
    assert config_utils.get_resources("emu", config)["node"] == "node05"
    assert config_utils.get_resources("emu", config)["memory"] == "16G"
    assert config_utils.get_program("seqkit", config) == "/opt/seqkit/bin/seqkit"


def test_missing_explicit_file_raises(tmpdir):
    with pytest.raises(ValueError):
        config_utils.load_system_config(str(tmpdir.join("missing.yaml")))


def test_conda_locations():
    config = {"resources": {"conda": {"dir": "/opt/conda"}}}
    assert config_utils.get_conda_profile(config) == "/opt/conda/etc/profile.d/conda.sh"
    assert config_utils.get_conda_cmd(config) == "/opt/conda/bin/conda"


@pytest.mark.parametrize(("env", "flag"), [("emu_env", "-n"), ("/home/u/envs/emu_env", "-p")])
def test_conda_run_prefix(env, flag):
    config = {"resources": {"conda": {"dir": "/opt/conda"}}}
    assert config_utils.conda_run_cmd(env, config) == ["/opt/conda/bin/conda", "run", flag, env]


def test_merge_does_not_modify_defaults():
    config_utils.merge_config(config_utils.DEFAULTS, {"resources": {"seqkit": {"cmd": "x"}}})
    assert config_utils.DEFAULTS["resources"]["seqkit"]["cmd"] == "seqkit"
