import logging

import pytest

from config.config_loader import ConfigLoader, ResolutionSettings, load_resolution_settings
from utils.logger import configure_logging


def test_default_settings_file():
    loader = ConfigLoader()

    assert loader.get("damage", "layer_cap") == 100
    assert loader.get("roster", "hatchery") == "Hatchery"
    assert load_resolution_settings(loader) == ResolutionSettings()


def test_missing_key_without_default_raises(tmp_path):
    loader = ConfigLoader(tmp_path / "absent.yaml")

    assert loader.config == {}
    assert loader.get("damage", "layer_cap", default=7) == 7
    with pytest.raises(KeyError):
        loader.get("damage", "layer_cap")


def test_settings_from_file(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "damage:\n  layer_cap: 50\nroster:\n  nestlings: [Grub]\n",
        encoding="utf-8",
    )
    settings = load_resolution_settings(ConfigLoader(path))

    assert settings.layer_cap == 50
    assert settings.nestlings == ("Grub",)
    assert settings.clamp_negative_factor is True


def test_configure_logging_is_idempotent():
    logger = configure_logging("DEBUG")
    handlers = list(logger.handlers)
    configure_logging(logging.INFO)

    assert logger.handlers == handlers
    assert logger.level == logging.INFO
