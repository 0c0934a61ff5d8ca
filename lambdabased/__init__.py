"""
Lambdabased - resources whose state is the result of a Lambda invocation.

A Lambda-backed resource invokes a function when it is created and whenever
its declared configuration changes, records the response, and optionally
invokes a finalizer function when it is destroyed. Resources are declared in
Python and deployed with Pulumi.
"""

from .core import LambdaBasedCore
from .settings import LambdaBasedSettings, get_settings, reload_settings

__version__ = "0.1.0"
__all__ = [
    "LambdaBasedCore",
    "LambdaBasedSettings",
    "get_settings",
    "reload_settings",
]
