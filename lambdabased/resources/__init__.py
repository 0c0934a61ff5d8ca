"""
Lambdabased Resources - Pydantic models for declaring Lambda-backed resources.
"""

from .base import Resource
from .lambda_invocation import LambdaInvocationResource

__all__ = [
    "LambdaInvocationResource",
    "Resource",
]
