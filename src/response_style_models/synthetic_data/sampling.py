"""
Marginal distributions for simulated model parameters.

A generation config names a distribution and its parameters. This module
turns that pair into a frozen scipy.stats distribution and checks that it
can only produce values the model accepts, e.g. positive variances.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

import numpy as np
from numpy.random import Generator
from numpy.typing import NDArray
from scipy import stats

from response_style_models.synthetic_data.config import DistributionConfig


class FrozenRV(Protocol):
    def rvs(
        self, size: Any, random_state: Any
    ) -> NDArray[np.floating[Any]]: ...
    def support(self) -> tuple[Any, Any]: ...


@dataclass(frozen=True)
class Support:
    """Closed interval [lower, upper] of admissible parameter values."""

    lower: float = -np.inf
    upper: float = np.inf

    def contains(self, other: "Support") -> bool:
        return self.lower <= other.lower and other.upper <= self.upper

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper}]"


POSITIVE = Support(lower=0.0)


@dataclass(frozen=True)
class ParameterDistribution:
    """
    A named scipy.stats distribution for one parameter block.

    Examples:
        >>> dist = ParameterDistribution("normal", stats.norm(0, 1))
        >>> dist = ParameterDistribution("inverse_gamma", stats.invgamma(3))
    """

    name: str
    rv: FrozenRV

    @property
    def support(self) -> Support:
        lower, upper = self.rv.support()
        return Support(lower=float(lower), upper=float(upper))

    def sample(self, n: int, rng: Generator) -> NDArray[np.float64]:
        """
        Draw n values.

        Returns:
            Array of shape (n,).
        """
        samples: NDArray[np.float64] = np.asarray(
            self.rv.rvs(size=n, random_state=rng), dtype=np.float64
        )
        return samples

    def check_support(self, target: Support, label: str) -> None:
        """
        Raises:
            ValueError: If the distribution can leave the target interval.
        """
        if not target.contains(self.support):
            raise ValueError(
                f"{label} needs values in {target}, but '{self.name}' "
                f"has support {self.support}"
            )


####################################################################
# Registry
####################################################################


DistributionFactory = Callable[..., FrozenRV]


class DistributionRegistry:
    def __init__(self) -> None:
        self._factories: dict[str, DistributionFactory] = {}

    def register(
        self, name: str
    ) -> Callable[[DistributionFactory], DistributionFactory]:
        def decorator(func: DistributionFactory) -> DistributionFactory:
            self._factories[name] = func
            return func

        return decorator

    def create(self, config: DistributionConfig) -> ParameterDistribution:
        """
        Build the distribution a config entry describes.

        Raises:
            ValueError: If the name is unknown or the parameters do not fit.
        """
        factory = self._factories.get(config.distribution)
        if factory is None:
            raise ValueError(
                f"Distribution '{config.distribution}' is not registered, "
                f"choose from {self.names}"
            )
        params = dict(config.params)
        try:
            rv = factory(**params)
        except TypeError as e:
            raise ValueError(
                f"Invalid parameters for '{config.distribution}': {params}"
            ) from e
        return ParameterDistribution(name=config.distribution, rv=rv)

    @property
    def names(self) -> list[str]:
        return sorted(self._factories)


registry = DistributionRegistry()


@registry.register("normal")
def normal(*, mean: float = 0.0, std: float = 1.0) -> FrozenRV:
    return stats.norm(loc=mean, scale=std)


@registry.register("uniform")
def uniform(*, low: float = 0.0, high: float = 1.0) -> FrozenRV:
    return stats.uniform(loc=low, scale=high - low)


@registry.register("truncated_normal")
def truncated_normal(
    *,
    mean: float = 0.0,
    std: float = 1.0,
    lower: float | None = None,
    upper: float | None = None,
) -> FrozenRV:
    """
    Normal distribution cut to [lower, upper]; None leaves a side open.
    """
    a = -np.inf if lower is None else (lower - mean) / std
    b = np.inf if upper is None else (upper - mean) / std
    return stats.truncnorm(a, b, loc=mean, scale=std)


@registry.register("log_normal")
def log_normal(*, median: float = 1.0, sdlog: float = 0.5) -> FrozenRV:
    """Log-normal with the given median and SD of log(X)."""
    return stats.lognorm(s=sdlog, scale=median)


@registry.register("half_normal")
def half_normal(*, std: float = 1.0) -> FrozenRV:
    return stats.halfnorm(scale=std)


@registry.register("inverse_gamma")
def inverse_gamma(*, shape: float, scale: float = 1.0) -> FrozenRV:
    """Inverse-gamma with shape alpha and scale beta, as used for variances."""
    return stats.invgamma(a=shape, scale=scale)
