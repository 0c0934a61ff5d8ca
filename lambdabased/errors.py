"""
Lambdabased errors.
"""


class LambdaBasedError(Exception):
    """Base exception for all lambdabased errors."""
    pass


class ConfigurationError(LambdaBasedError):
    """Errors in resource or provider configuration."""
    pass


class InvocationError(LambdaBasedError):
    """A Lambda invocation did not succeed."""

    def __init__(self, message: str, function_name: str):
        super().__init__(message)
        self.function_name = function_name


class TransportError(InvocationError):
    """The invocation call itself failed (network, auth, throttling)."""
    pass


class FunctionError(InvocationError):
    """The function ran but reported an error in its response."""

    def __init__(
        self, message: str, function_name: str, function_error: str, payload: bytes
    ):
        super().__init__(message, function_name)
        self.function_error = function_error
        self.payload = payload
