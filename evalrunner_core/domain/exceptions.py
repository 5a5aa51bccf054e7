"""
Standard exceptions for evalrunner.

This module defines the hierarchy of exceptions used across the harness.
"""


class EvalRunnerError(Exception):
    """Base exception for all evalrunner errors."""
    pass


class ConfigurationError(EvalRunnerError):
    """Required configuration is missing or invalid."""
    pass


class EvalSetError(EvalRunnerError):
    """Error loading or validating an eval set."""
    pass


class ProviderError(EvalRunnerError):
    """Base exception for model backend errors."""
    pass


class InferenceError(ProviderError):
    """Error during chat completion."""
    pass


class EmbeddingError(ProviderError):
    """Error during embedding generation."""
    pass


class ReportError(EvalRunnerError):
    """Error writing the result report."""
    pass
