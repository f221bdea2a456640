import pytest

from campose.config import DriftCheckConfig, load_yaml_config, parse_args, validate_config


def test_validate_config_accepts_defaults():
    validate_config(DriftCheckConfig())


def test_validate_config_rejects_negative_steps():
    with pytest.raises(ValueError, match="--steps"):
        validate_config(DriftCheckConfig(steps=-1))


def test_validate_config_rejects_non_finite_angle():
    with pytest.raises(ValueError, match="--angle-deg"):
        validate_config(DriftCheckConfig(angle_deg=float("nan")))


def test_validate_config_rejects_negative_orthogonalize_every():
    with pytest.raises(ValueError, match="--orthogonalize-every"):
        validate_config(DriftCheckConfig(orthogonalize_every=-5))


def test_validate_config_rejects_non_positive_tolerance():
    with pytest.raises(ValueError, match="--tolerance"):
        validate_config(DriftCheckConfig(tolerance=0.0))


def test_validate_config_rejects_invalid_log_level():
    with pytest.raises(ValueError, match="--log-level"):
        validate_config(DriftCheckConfig(log_level="loud"))


def test_parse_args_defaults():
    cfg = parse_args([])
    assert cfg == DriftCheckConfig()


def test_parse_args_reads_yaml_config(tmp_path):
    cfg_path = tmp_path / "drift.yaml"
    cfg_path.write_text(
        "\n".join(
            [
                "steps: 250",
                "angle-deg: 2.5",
                "seed: 9",
                "orthogonalize_every: 50",
                "tolerance: 1.0e-9",
                "log_level: debug",
            ]
        ),
        encoding="utf-8",
    )
    cfg = parse_args(["--config", str(cfg_path)])
    assert cfg.steps == 250
    assert cfg.angle_deg == 2.5
    assert cfg.seed == 9
    assert cfg.orthogonalize_every == 50
    assert cfg.tolerance == 1e-9
    assert cfg.log_level == "debug"


def test_parse_args_cli_overrides_yaml(tmp_path):
    cfg_path = tmp_path / "drift.yaml"
    cfg_path.write_text("steps: 250\nangle_deg: 2.5\n", encoding="utf-8")
    cfg = parse_args(["--config", str(cfg_path), "--steps", "12"])
    assert cfg.steps == 12
    assert cfg.angle_deg == 2.5


def test_parse_args_rejects_unknown_yaml_key(tmp_path):
    cfg_path = tmp_path / "drift.yaml"
    cfg_path.write_text("steps: 10\nbad_key: 1\n", encoding="utf-8")
    with pytest.raises(SystemExit):
        parse_args(["--config", str(cfg_path)])


def test_parse_args_rejects_invalid_value():
    with pytest.raises(SystemExit):
        parse_args(["--steps", "-3"])


def test_load_yaml_config_missing_file(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        load_yaml_config(str(tmp_path / "missing.yaml"))


def test_load_yaml_config_rejects_non_mapping(tmp_path):
    cfg_path = tmp_path / "drift.yaml"
    cfg_path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_yaml_config(str(cfg_path))


def test_load_yaml_config_rejects_bad_type(tmp_path):
    cfg_path = tmp_path / "drift.yaml"
    cfg_path.write_text("steps: many\n", encoding="utf-8")
    with pytest.raises(ValueError, match="steps"):
        load_yaml_config(str(cfg_path))


def test_load_yaml_config_empty_file(tmp_path):
    cfg_path = tmp_path / "drift.yaml"
    cfg_path.write_text("", encoding="utf-8")
    assert load_yaml_config(str(cfg_path)) == {}
