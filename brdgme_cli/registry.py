
"""Game engine discovery utilities."""

from __future__ import annotations

import importlib
import json
import warnings
from pathlib import Path
from typing import Callable, Dict

from brdgme_cli.plugins.base import GamePlugin


REQUIRED_PLUGIN_METHODS = (
    "player_counts",
    "player_count",
    "start",
    "status",
    "command",
    "pub_state",
    "player_state",
    "pub_render",
    "player_render",
    "load",
    "dump",
)


def _validate_plugin(plugin: object) -> None:
    for method_name in REQUIRED_PLUGIN_METHODS:
        if not callable(getattr(plugin, method_name, None)):
            raise TypeError(f"missing required method: {method_name}")

    player_counts = plugin.player_counts()
    if not player_counts or not all(isinstance(count, int) for count in player_counts):
        raise ValueError("player_counts() must return a non-empty list of integers")


def load_plugins() -> Dict[str, Callable[[], GamePlugin]]:
    plugins: Dict[str, Callable[[], GamePlugin]] = {}
    plugins_dir = Path(__file__).resolve().parent / "plugins"

    for manifest_path in sorted(plugins_dir.glob("*/plugin.json")):
        try:
            manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
            plugin_id = manifest["id"]
            module_name = f"brdgme_cli.plugins.{manifest_path.parent.name}.game"
            module = importlib.import_module(module_name)
            _validate_plugin(module.Plugin())
            plugins[plugin_id] = module.Plugin
        except Exception as exc:
            warnings.warn(
                f"Skipping plugin at {manifest_path}: {exc}",
                RuntimeWarning,
                stacklevel=2,
            )

    return plugins
