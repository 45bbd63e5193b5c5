from pathlib import Path

import pytest

from bizmetrics.config import default_app_config, load_app_config


def test_load_app_config_reads_sections_and_resolves_paths(tmp_path) -> None:
    """Relative paths are resolved against the directory of the TOML file."""
    config_file = tmp_path / "bizmetrics_config.toml"
    config_file.write_text(
        """
[business]
currency = "XOF"

[data]
dir = "records"

[reports]
default_period = "quarter"
low_stock_threshold = 5
top_products_limit = 3

[display]
mode = "both"
percent_decimals = 1
output_dir = "exports"
""",
        encoding="utf-8",
    )

    cfg = load_app_config(str(config_file))

    assert cfg.currency == "XOF"
    assert cfg.data_dir == (tmp_path / "records").resolve()
    assert cfg.default_period == "quarter"
    assert cfg.low_stock_threshold == 5.0
    assert cfg.top_products_limit == 3
    assert cfg.display_mode == "both"
    assert cfg.percent_decimals == 1
    assert cfg.output_dir == (tmp_path / "exports").resolve()


def test_load_app_config_defaults_for_missing_sections(tmp_path) -> None:
    config_file = tmp_path / "cfg.toml"
    config_file.write_text("", encoding="utf-8")

    cfg = load_app_config(str(config_file))

    assert cfg.currency == "FCFA"
    assert cfg.default_period == "month"
    assert cfg.low_stock_threshold == 10.0
    assert cfg.top_products_limit == 10
    assert cfg.display_mode == "table"
    assert cfg.data_dir == (tmp_path / "data" / "businesses").resolve()


def test_load_app_config_uses_default_file_in_cwd(tmp_path, monkeypatch) -> None:
    (tmp_path / "bizmetrics_config.toml").write_text(
        '[business]\ncurrency = "EUR"\n', encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)

    assert load_app_config().currency == "EUR"


def test_load_app_config_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_app_config(str(tmp_path / "nope.toml"))


@pytest.mark.parametrize(
    "content,message",
    [
        ("[reports\n", "Failed to parse"),
        ('[reports]\ndefault_period = "decade"\n', "default_period"),
        ("[reports]\ntop_products_limit = 0\n", "top_products_limit"),
        ('[reports]\nlow_stock_threshold = "low"\n', "low_stock_threshold"),
        ('[display]\nmode = "html"\n', "display.mode"),
        ('business = "shop"\n', r"\[business\]"),
    ],
)
def test_load_app_config_rejects_invalid_values(tmp_path, content, message) -> None:
    config_file = tmp_path / "cfg.toml"
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        load_app_config(str(config_file))


def test_default_app_config(tmp_path) -> None:
    cfg = default_app_config(Path(tmp_path))

    assert cfg.data_dir == tmp_path.resolve() / "data" / "businesses"
    assert cfg.output_dir == tmp_path.resolve() / "data" / "output"
    assert cfg.currency == "FCFA"
