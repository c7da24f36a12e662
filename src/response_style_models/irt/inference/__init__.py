"""
Hierarchical Bayesian inference core.

This module provides the pieces an external MCMC sampler needs to fit the
response-style models:

Key components:
- ModelConfig / Hyperparameters: Configuration of one model
- ModelSpecification: Validated, immutable model structure
- HierarchyLayout: (trait group, process) tables of item means and variances
- RawParameters / TransformedParameters: Sampled and derived quantities
- log_prior / categorical_log_likelihood: Density terms
- JointLogDensity: Log posterior density up to a constant
- UnconstrainedParameterization: Flat real vector <-> RawParameters
"""
