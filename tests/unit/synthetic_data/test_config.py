from pathlib import Path

import pytest

from response_style_models.irt.inference.enums import (
    AcquiescenceSource,
    ModelFamily,
)
from response_style_models.synthetic_data.config import (
    GenerationConfig,
    ItemConfig,
    PersonConfig,
)
from response_style_models.synthetic_data.parameters import load_config
from response_style_models.synthetic_data.presets import (
    PARAMS_DIR,
    get_available_presets,
    get_preset,
)

########################################################
# Configuration loading
########################################################


def test_configuration_presets_load() -> None:
    """Make sure that all the preset configuration files load."""

    for config_path in PARAMS_DIR.glob("*.yaml"):
        # Skip empty files
        if config_path.read_text().strip() == "":
            continue
        preset = load_config(config_path)
        assert preset is not None


def test_get_preset_baseline_succeeds() -> None:
    preset = get_preset("baseline")
    assert preset.n_trait_groups == 2
    assert preset.items.sigma2_beta.distribution == "inverse_gamma"


def test_get_preset_unknown_raises() -> None:
    with pytest.raises(ValueError, match="Unknown preset"):
        get_preset("nonexistent_preset")


def test_available_presets() -> None:
    assert {"baseline", "hh_two_traits", "pcm_single_trait"} <= set(
        get_available_presets()
    )


def test_partial_yaml_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "small.yaml"
    path.write_text("n_persons: 10\nn_items: 4\nrandom_seed: 1\n")

    config = load_config(path)

    assert config.family == "mpt"
    assert config.persons.covariance_df_offset == 1
    assert config.items.reverse_keyed_fraction == pytest.approx(0.3)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")


########################################################
# Validation
########################################################


class TestGenerationConfig:
    def test_to_model_config(self) -> None:
        config = GenerationConfig(
            n_persons=10, n_items=4, variant="hh", random_seed=0
        )
        model_config = config.to_model_config()

        assert model_config.family == ModelFamily.MPT
        assert (
            model_config.mpt.acquiescence_source
            == AcquiescenceSource.TRAIT_SPECIFIC
        )

    def test_unknown_family(self) -> None:
        with pytest.raises(ValueError):
            GenerationConfig(n_persons=10, n_items=4, family="grm")

    def test_more_groups_than_items(self) -> None:
        with pytest.raises(ValueError, match="trait groups"):
            GenerationConfig(n_persons=10, n_items=2, n_trait_groups=3)

    def test_no_persons(self) -> None:
        with pytest.raises(ValueError, match="person"):
            GenerationConfig(n_persons=0, n_items=2)

    def test_person_config_validation(self) -> None:
        with pytest.raises(ValueError, match="covariance_df_offset"):
            PersonConfig(covariance_df_offset=0)
        with pytest.raises(ValueError, match="covariance_scale"):
            PersonConfig(covariance_scale=0.0)

    def test_item_config_validation(self) -> None:
        with pytest.raises(ValueError, match="reverse_keyed_fraction"):
            ItemConfig(reverse_keyed_fraction=1.5)
