import pytest
import yaml

from hazardcast.config import DEFAULTS, PROJECT_ROOT, get_path, load_config


def test_default_config_sections():
    cfg = load_config()
    for section in ("paths", "sampling", "encoding", "training"):
        assert section in cfg
    assert cfg["encoding"] == {"year_min": 1990, "year_max": 2030}
    assert cfg["sampling"]["local_fraction"] == 0.4
    assert cfg["training"]["train_ratio"] == 0.8


def test_override_is_deep_merged(tmp_path):
    path = tmp_path / "run.yaml"
    path.write_text("sampling:\n  local_radius_deg: 0.25\ntraining:\n  fire:\n    epochs: 3\n")
    cfg = load_config(str(path))
    assert cfg["sampling"]["local_radius_deg"] == 0.25
    assert cfg["sampling"]["global_fraction"] == DEFAULTS["sampling"]["global_fraction"]
    assert cfg["training"]["fire"]["epochs"] == 3
    assert cfg["training"]["fire"]["batch_size"] == DEFAULTS["training"]["fire"]["batch_size"]


def test_returned_config_is_a_copy(tmp_path):
    path = tmp_path / "copy.yaml"
    path.write_text("encoding:\n  year_min: 2000\n")
    cfg = load_config(str(path))
    cfg["encoding"]["year_min"] = 0
    assert load_config(str(path))["encoding"]["year_min"] == 2000


def test_env_vars_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("HAZARDCAST_OUT", "/scratch/runs")
    path = tmp_path / "env.yaml"
    path.write_text("paths:\n  output_dir: ${HAZARDCAST_OUT}/fire\n")
    cfg = load_config(str(path))
    assert cfg["paths"]["output_dir"] == "/scratch/runs/fire"
    assert get_path(cfg, "output_dir") == "/scratch/runs/fire"


def test_get_path_resolves_against_project_root():
    cfg = load_config()
    assert get_path(cfg, "fire_csv") == str(PROJECT_ROOT / cfg["paths"]["fire_csv"])


def test_missing_override_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.yaml"))


def _leaf_paths(d, prefix=()):
    for k, v in d.items():
        if isinstance(v, dict):
            yield from _leaf_paths(v, prefix + (k,))
        else:
            yield prefix + (k,)


def test_default_yaml_only_overrides_known_keys():
    with open(PROJECT_ROOT / "configs" / "default.yaml") as f:
        site = yaml.safe_load(f) or {}
    known = set(_leaf_paths(DEFAULTS))
    assert set(_leaf_paths(site)) <= known
    assert load_config() == DEFAULTS
