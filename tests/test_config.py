from __future__ import annotations

from pathlib import Path

import pytest

from mapscope.config import AppConfig, load_app_config
from mapscope.contracts.error import BadInputError


def test_default_config_validates(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MAPSCOPE_SIZES", "MAPSCOPE_SEED", "MAPSCOPE_SHUFFLE", "MAPSCOPE_OA_CAPACITY"):
        monkeypatch.delenv(name, raising=False)
    cfg = load_app_config(None)
    assert cfg.workload.sizes == [100, 500, 1000, 5000, 10000]
    assert cfg.workload.shuffle is False
    assert cfg.open_addressing.capacity == 16384
    assert cfg.logging.level == "INFO"


def test_load_from_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg_path = tmp_path / "config.toml"
    cfg_path.write_text(
        """
[workload]
sizes = [10, 20]
shuffle = "yes"
seed = 42
delete_fraction = 0.25
lookup_misses = 5

[open_addressing]
capacity = 64

[logging]
level = "debug"
json = true
""",
        encoding="utf-8",
    )
    cfg = AppConfig.load(cfg_path, env={})
    assert cfg.workload.sizes == [10, 20]
    assert cfg.workload.shuffle is True
    assert cfg.workload.seed == 42
    assert cfg.workload.delete_fraction == pytest.approx(0.25)
    assert cfg.open_addressing.capacity == 64
    assert cfg.logging.json is True

    # env override takes precedence
    monkeypatch.setenv("MAPSCOPE_SIZES", "3, 4,5")
    monkeypatch.setenv("MAPSCOPE_OA_CAPACITY", "128")
    monkeypatch.setenv("MAPSCOPE_SHUFFLE", "off")
    cfg_env = AppConfig.load(cfg_path)
    assert cfg_env.workload.sizes == [3, 4, 5]
    assert cfg_env.open_addressing.capacity == 128
    assert cfg_env.workload.shuffle is False


@pytest.mark.parametrize(
    "body",
    [
        "[workload]\ndelete_fraction = 1.5\n",
        "[workload]\nsizes = []\n",
        "[workload]\nsizes = [0]\n",
        "[open_addressing]\ncapacity = 0\n",
        "[logging]\nlevel = \"chatty\"\n",
        "[workload]\nunknown = 1\n",
        "[mystery]\nx = 1\n",
        "workload = 3\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    bad_path = tmp_path / "bad.toml"
    bad_path.write_text(body, encoding="utf-8")
    with pytest.raises(BadInputError):
        AppConfig.load(bad_path, env={})


def test_missing_file_and_bad_toml(tmp_path: Path) -> None:
    with pytest.raises(BadInputError):
        AppConfig.load(tmp_path / "nope.toml", env={})
    broken = tmp_path / "broken.toml"
    broken.write_text("[workload\n", encoding="utf-8")
    with pytest.raises(BadInputError):
        AppConfig.load(broken, env={})


@pytest.mark.parametrize(
    "name,value",
    [
        ("MAPSCOPE_SEED", "abc"),
        ("MAPSCOPE_SIZES", "1,x"),
        ("MAPSCOPE_OA_CAPACITY", "lots"),
        ("MAPSCOPE_LOG_JSON", "maybe"),
    ],
)
def test_bad_env_overrides_raise(name: str, value: str) -> None:
    with pytest.raises(BadInputError):
        AppConfig.load(None, env={name: value})
