"""Pulumi dynamic providers for lambdabased resources."""

from .lambda_invocation import (
    LambdaInvocation,
    LambdaInvocationInputs,
    LambdaInvocationProvider,
)

__all__ = [
    "LambdaInvocation",
    "LambdaInvocationInputs",
    "LambdaInvocationProvider",
]
