"""
Constants shared across the response-style models.
"""

# Ordered response categories of a 5-point item, 1-based as on the survey form
N_CATEGORIES = 5
MIN_CATEGORY = 1
MAX_CATEGORY = 5

# Category probabilities are clamped to this floor before taking a logarithm.
# log(PROBABILITY_FLOOR) is about -690.8, so the likelihood stays finite.
PROBABILITY_FLOOR = 1e-300

# Bounds on the argument of the logistic inside the probit approximation.
# expit(30) = 1 - 9.4e-14, so branch probabilities stay strictly in (0, 1).
LINK_CLIP_MIN = -30.0
LINK_CLIP_MAX = 30.0

# Coefficients of the logistic approximation to the standard normal CDF
PHI_APPROX_CUBIC = 0.07056
PHI_APPROX_LINEAR = 1.5976

# Upper bound of the uniform prior on the person scaling parameters
DEFAULT_XI_UPPER = 100.0
