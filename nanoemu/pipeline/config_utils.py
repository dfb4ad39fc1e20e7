"""Loads system configuration from .yaml files, merged over defaults.
"""
import copy
import os

import toolz as tz
import yaml

SYSTEM_CONFIG = "nanoemu_system.yaml"

DEFAULTS = {
    "resources": {
        "seqkit": {"cmd": "seqkit"},
        "nanocomp": {"cmd": "NanoComp", "env": "nanocomp_env"},
        "emu": {"cmd": "emu", "env": "emu_env", "db": "~/emu_prebuilt_db/",
                "cores": 8, "memory": "16G", "node": "node02"},
        "sbatch": {"cmd": "sbatch"},
        "conda": {"dir": "/opt/miniconda/miniconda3"},
    },
}

# ## Retrieval functions

def load_system_config(config_file=None, work_dir=None):
    """Load nanoemu_system.yaml configuration, handling standard defaults.

    Without an explicit file, looks in the current directory and then in
    work_dir. A missing default file is not an error; built in defaults
    cover a standard installation.
    """
    if config_file is None:
        candidates = [os.path.join(os.getcwd(), SYSTEM_CONFIG)]
        if work_dir:
            candidates.append(os.path.join(work_dir, SYSTEM_CONFIG))
        config_file = next((x for x in candidates if os.path.exists(x)), None)
    elif not os.path.exists(config_file):
        raise ValueError("Could not find input system configuration file %s" % config_file)
    config = load_config(config_file) if config_file else {}
    config = merge_config(DEFAULTS, config)
    config["nanoemu_system"] = config_file
    return config, config_file

def load_config(config_file):
    with open(config_file) as in_handle:
        config = yaml.safe_load(in_handle)
    return config or {}

def merge_config(base, custom):
    """Merge custom settings over base, recursing into nested dictionaries.
    """
    out = copy.deepcopy(base)
    for k, v in custom.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = merge_config(out[k], v)
        else:
            out[k] = v
    return out

def get_resources(name, config):
    """Retrieve resources for a program, pulling from multiple config sources.
    """
    return tz.get_in(["resources", name], config,
                     tz.get_in(["resources", "default"], config, {}))

def get_program(name, config, default=None):
    """Retrieve the command line executable for a program.
    """
    pconfig = tz.get_in(["resources", name], config)
    if pconfig is None:
        return default or name
    elif isinstance(pconfig, str):
        return pconfig
    elif "cmd" in pconfig:
        return pconfig["cmd"]
    elif default is not None:
        return default
    else:
        return name

# ## conda installation

def get_conda_dir(config):
    return expand_path(tz.get_in(["resources", "conda", "dir"], config))

def get_conda_profile(config):
    """Shell profile script shipped with the conda installation.
    """
    return os.path.join(get_conda_dir(config), "etc", "profile.d", "conda.sh")

def get_conda_cmd(config):
    return tz.get_in(["resources", "conda", "cmd"], config,
                     os.path.join(get_conda_dir(config), "bin", "conda"))

def expand_path(path):
    """Combines os.path.expandvars with replacing ~ with $HOME.
    """
    if path is None:
        return None
    return os.path.expandvars(os.path.expanduser(path))

def conda_run_cmd(env, config):
    """Prefix for running a program inside a named or path based conda environment.
    """
    flag = "-p" if os.sep in env else "-n"
    return [get_conda_cmd(config), "run", flag, env]
