"""
Synthetic data generation module for 5-point survey responses.

This module draws every model parameter from its hierarchical prior and
simulates responses through the response-style or partial credit tree. The
output is used to exercise the inference core end to end.

It is NOT intended for production inference.
"""
