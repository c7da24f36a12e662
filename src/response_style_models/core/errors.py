"""
Exception types raised by the response-style models.

Configuration errors are fatal and raised while a model is being built.
Domain violations are raised while evaluating one parameter set; the joint
density turns them into a rejected proposal (log density of -inf).
"""


class ModelError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(ModelError, ValueError):
    pass


class InvalidDimensionError(ConfigurationError):
    pass


class DomainViolationError(ModelError, ValueError):
    pass
