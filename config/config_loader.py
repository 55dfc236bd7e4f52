import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

import yaml

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent / "settings.yaml"


class ConfigLoader:
    def __init__(self, config_file=DEFAULT_SETTINGS_PATH):
        self.config = {}
        if os.path.exists(config_file):
            with open(config_file, "r", encoding="utf-8") as f:
                self.config = yaml.safe_load(f) or {}

    def get(self, *keys, default=None):
        """
        Return the value stored under the nested ``keys`` path.

        A missing path raises ``KeyError`` unless a ``default`` is supplied,
        in which case the default is returned.
        """
        ref = self.config
        for key in keys:
            if isinstance(ref, dict) and key in ref:
                ref = ref[key]
            else:
                if default is not None:
                    return default
                raise KeyError(f"Configuration key {' -> '.join(keys)} not found and no default provided.")
        return ref


@dataclass(frozen=True)
class ResolutionSettings:
    """Tunables read by the resolution pipeline.

    The roster names identify the encounter members that some abilities key
    on (the infected station, the hatchery and its nestlings).
    """

    clamp_negative_factor: bool = True
    layer_cap: int = 100
    space_station: str = "Space Station Sentry Turret"
    hatchery: str = "Hatchery"
    nestlings: Tuple[str, ...] = ("Nest Thunderbeast", "Nest Warrior", "Nest Beetle")
    swarm_members: Tuple[str, ...] = field(
        default=("Nest Thunderbeast", "Nest Warrior", "Nest Beetle", "Hatchery", "Swarm Queen")
    )
    log_level: str = "INFO"


def load_resolution_settings(loader: ConfigLoader | None = None) -> ResolutionSettings:
    """Build :class:`ResolutionSettings` from ``loader`` (defaults to ``settings.yaml``)."""

    loader = loader or ConfigLoader()
    defaults = ResolutionSettings()
    return ResolutionSettings(
        clamp_negative_factor=bool(
            loader.get("damage", "clamp_negative_factor", default=defaults.clamp_negative_factor)
        ),
        layer_cap=int(loader.get("damage", "layer_cap", default=defaults.layer_cap)),
        space_station=str(loader.get("roster", "space_station", default=defaults.space_station)),
        hatchery=str(loader.get("roster", "hatchery", default=defaults.hatchery)),
        nestlings=tuple(loader.get("roster", "nestlings", default=list(defaults.nestlings))),
        swarm_members=tuple(
            loader.get("roster", "swarm_members", default=list(defaults.swarm_members))
        ),
        log_level=str(loader.get("logging", "level", default=defaults.log_level)),
    )
