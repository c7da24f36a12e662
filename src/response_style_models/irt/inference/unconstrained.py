"""
Unconstrained parameterization for external samplers.

Gradient-based and random-walk samplers work on a flat vector in R^d. This
module maps such a vector onto RawParameters and reports the log absolute
Jacobian determinant of the map, so that

    log p(vector) = log p(raw) + log |J|

Support transforms:
    theta_raw, beta_raw, mu_beta, mu_beta_acq_extreme   identity
    xi_theta            xi = xi_upper * expit(u)
    sigma2_beta_raw     sigma2 = exp(u)
    Sigma_raw (S >= 2)  Sigma = L L^T, L lower triangular with exp(u) diagonal
    Sigma_raw (S == 1)  variance = exp(u)
"""

import numpy as np
from numpy.typing import NDArray
from scipy.special import log_expit, logit

from response_style_models.core.errors import (
    DomainViolationError,
    InvalidDimensionError,
)
from response_style_models.irt.inference.model import ModelSpecification
from response_style_models.irt.inference.parameters import RawParameters


class UnconstrainedParameterization:
    """
    Bijection between R^d and the support of RawParameters.

    Blocks are laid out in a fixed order; block_slices() gives the position
    of each block inside the flat vector.
    """

    def __init__(self, spec: ModelSpecification):
        self.spec = spec
        s = spec.n_dimensions
        self._tril = np.tril_indices(s)

        sizes = {
            "theta_raw": spec.n_persons * s,
            "xi_theta": 0 if spec.is_univariate else s,
            "sigma_raw": len(self._tril[0]),
            "beta_raw": spec.n_items * spec.layout.n_processes,
            "mu_beta": spec.layout.n_free_cells,
            "sigma2_beta_raw": spec.layout.n_free_cells,
            "mu_beta_acq_extreme": (
                1 if spec.has_person_level_acq_extreme else 0
            ),
        }
        self._slices: dict[str, slice] = {}
        start = 0
        for name, size in sizes.items():
            self._slices[name] = slice(start, start + size)
            start += size
        self._dimension = start

    @property
    def dimension(self) -> int:
        """Length d of the unconstrained vector."""
        return self._dimension

    def block_slices(self) -> dict[str, slice]:
        return dict(self._slices)

    def to_raw(
        self, vector: NDArray[np.float64]
    ) -> tuple[RawParameters, float]:
        """
        Map an unconstrained vector onto a raw parameter set.

        Args:
            vector: Flat array of length dimension.

        Returns:
            Tuple of (RawParameters, log absolute Jacobian determinant).
        """
        vector = np.asarray(vector, dtype=np.float64)
        if vector.shape != (self._dimension,):
            raise InvalidDimensionError(
                f"Expected vector of shape ({self._dimension},), "
                f"got {vector.shape}"
            )
        if not np.all(np.isfinite(vector)):
            raise DomainViolationError("Unconstrained vector is not finite")

        spec = self.spec
        s = spec.n_dimensions
        layout = spec.layout
        blocks = {name: vector[sl] for name, sl in self._slices.items()}
        log_jacobian = 0.0

        theta_raw = blocks["theta_raw"].reshape(spec.n_persons, s)

        if spec.is_univariate:
            xi_theta = np.ones(1, dtype=np.float64)
        else:
            u = blocks["xi_theta"]
            upper = spec.config.priors.xi_upper
            xi_theta = upper * np.exp(log_expit(u))
            log_jacobian += float(
                np.sum(np.log(upper) + log_expit(u) + log_expit(-u))
            )

        sigma_raw, sigma_log_jacobian = self._covariance_from_vector(
            blocks["sigma_raw"]
        )
        log_jacobian += sigma_log_jacobian

        beta_raw = blocks["beta_raw"].reshape(
            spec.n_items, layout.n_processes
        )
        mu_beta = layout.from_free_values(blocks["mu_beta"])

        u_sigma2 = blocks["sigma2_beta_raw"]
        sigma2_beta_raw = layout.from_free_values(np.exp(u_sigma2))
        log_jacobian += float(np.sum(u_sigma2))

        mu_beta_acq_extreme = None
        if spec.has_person_level_acq_extreme:
            mu_beta_acq_extreme = float(blocks["mu_beta_acq_extreme"][0])

        raw = RawParameters(
            theta_raw=theta_raw,
            xi_theta=xi_theta,
            sigma_raw=sigma_raw,
            beta_raw=beta_raw,
            mu_beta=mu_beta,
            sigma2_beta_raw=sigma2_beta_raw,
            mu_beta_acq_extreme=mu_beta_acq_extreme,
        )
        return raw, log_jacobian

    def to_unconstrained(self, raw: RawParameters) -> NDArray[np.float64]:
        """
        Inverse map, e.g. to turn initial values into a sampler start point.

        Raises:
            DomainViolationError: If raw lies outside the support.
        """
        spec = self.spec
        spec.check_parameters(raw)
        layout = spec.layout

        vector = np.empty(self._dimension, dtype=np.float64)
        vector[self._slices["theta_raw"]] = raw.theta_raw.ravel()

        if not spec.is_univariate:
            upper = spec.config.priors.xi_upper
            ratio = raw.xi_theta / upper
            if not np.all((ratio > 0.0) & (ratio < 1.0)):
                raise DomainViolationError(
                    f"xi_theta must lie in (0, {upper}), got {raw.xi_theta}"
                )
            vector[self._slices["xi_theta"]] = logit(ratio)

        vector[self._slices["sigma_raw"]] = self._covariance_to_vector(
            raw.sigma_raw
        )
        vector[self._slices["beta_raw"]] = raw.beta_raw.ravel()
        vector[self._slices["mu_beta"]] = layout.free_values(raw.mu_beta)

        sigma2 = layout.free_values(raw.sigma2_beta_raw)
        if not np.all(sigma2 > 0):
            raise DomainViolationError("sigma2_beta_raw must be positive")
        vector[self._slices["sigma2_beta_raw"]] = np.log(sigma2)

        if raw.mu_beta_acq_extreme is not None:
            vector[self._slices["mu_beta_acq_extreme"]] = (
                raw.mu_beta_acq_extreme
            )
        return vector

    def _covariance_from_vector(
        self, values: NDArray[np.float64]
    ) -> tuple[NDArray[np.float64], float]:
        s = self.spec.n_dimensions
        if s == 1:
            return np.exp(values).reshape(1, 1), float(values[0])

        chol = np.zeros((s, s), dtype=np.float64)
        chol[self._tril] = values
        log_diag = np.diag(chol).copy()
        chol[np.diag_indices(s)] = np.exp(log_diag)
        sigma: NDArray[np.float64] = chol @ chol.T

        # |J| = 2^S prod_k L_kk^(S - k + 1), k 0-based, including exp()
        exponents = s - np.arange(s) + 1
        log_jacobian = s * np.log(2.0) + float(np.sum(exponents * log_diag))
        return sigma, log_jacobian

    def _covariance_to_vector(
        self, sigma: NDArray[np.float64]
    ) -> NDArray[np.float64]:
        s = self.spec.n_dimensions
        if s == 1:
            if not sigma[0, 0] > 0:
                raise DomainViolationError("Variance must be positive")
            return np.log(sigma).ravel()

        try:
            chol = np.linalg.cholesky(sigma)
        except np.linalg.LinAlgError as e:
            raise DomainViolationError(
                "Covariance matrix is not positive-definite"
            ) from e
        chol[np.diag_indices(s)] = np.log(np.diag(chol))
        result: NDArray[np.float64] = chol[self._tril]
        return result
