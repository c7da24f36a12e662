#!/usr/bin/env python
"""
Simulate survey data sets from the preset generation configs.

For every preset this writes three files to the output directory:
    {preset}.csv          person_id plus one column of 1..5 responses per item
    {preset}_items.csv    item_id, reverse_keyed, trait_dimension
    {preset}_truth.npz    the raw parameters the responses were drawn from
"""

import dataclasses
import logging
from pathlib import Path

import numpy as np
import typer

from response_style_models.synthetic_data.data_models import GeneratedData
from response_style_models.synthetic_data.generators import (
    generate_survey_responses,
    to_csv,
)
from response_style_models.synthetic_data.presets import (
    get_available_presets,
    get_preset,
)

SYNTHETIC_DATA_DIR = Path(__file__).parent.parent / "data" / "synthetic"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("simulate_survey")

app = typer.Typer()


def save_truth(data: GeneratedData, path: Path) -> None:
    """Store every non-empty raw parameter block as an array."""
    arrays = {
        name: np.asarray(value)
        for name, value in dataclasses.asdict(data.raw_parameters).items()
        if value is not None
    }
    np.savez(path, **arrays)


@app.command()
def main(
    presets: list[str] | None = typer.Argument(
        None, help="Presets to simulate (default: all)"
    ),
    output_dir: Path = typer.Option(
        SYNTHETIC_DATA_DIR, "--output-dir", "-o", help="Output directory"
    ),
    seed: int | None = typer.Option(
        None, "--seed", help="Override the preset random seed"
    ),
) -> None:
    """Simulate responses for the given presets."""
    available = get_available_presets()
    names = presets or available
    unknown = sorted(set(names) - set(available))
    if unknown:
        logger.error("Unknown presets %s, available: %s", unknown, available)
        raise typer.Exit(1)

    output_dir.mkdir(parents=True, exist_ok=True)

    for name in names:
        config = get_preset(name)
        if seed is not None:
            config = dataclasses.replace(config, random_seed=seed)

        data = generate_survey_responses(config)
        to_csv(
            data,
            output_dir / f"{name}.csv",
            output_dir / f"{name}_items.csv",
        )
        save_truth(data, output_dir / f"{name}_truth.npz")

        logger.info(
            "%s: %d persons x %d items (%s/%s), category rates %s",
            name,
            config.n_persons,
            config.n_items,
            config.family,
            config.variant,
            np.round(data.category_rates, 3).tolist(),
        )

    logger.info("Wrote %d data sets to %s", len(names), output_dir)


if __name__ == "__main__":
    app()
