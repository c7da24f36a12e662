"""
Named generation configs shipped with the package.

Every non-empty YAML file in params/ is one preset, e.g. baseline (full
response style tree on two traits) or pcm_single_trait.
"""

from pathlib import Path

from response_style_models.synthetic_data.config import GenerationConfig
from response_style_models.synthetic_data.parameters import load_config

PARAMS_DIR = Path(__file__).parent / "params"


def get_available_presets() -> list[str]:
    return sorted(
        path.stem
        for path in PARAMS_DIR.glob("*.yaml")
        if path.read_text().strip()
    )


def preset_path(name: str) -> Path:
    """
    Raises:
        ValueError: If no preset of that name exists.
    """
    if name not in get_available_presets():
        raise ValueError(
            f"Unknown preset: {name}. "
            f"Available presets: {get_available_presets()}"
        )
    return PARAMS_DIR / f"{name}.yaml"


def get_preset(name: str) -> GenerationConfig:
    return load_config(preset_path(name))
