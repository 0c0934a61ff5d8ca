"""
Tenant Bootstrap Example - Lambda-backed resources.

Each resource invokes a Lambda function on `lambdabased apply` and records the
response. Changing the input or a trigger re-invokes the function; removing a
resource (or `lambdabased destroy`) runs its finalizer, if it has one.
"""

from lambdabased.models import FinalizerConfig
from lambdabased.resources import LambdaInvocationResource

# Creates the tenant's tables; the response lists what was created
schema = LambdaInvocationResource(
    name="tenant-schema",
    function_name="tenant-schema-migrate",
    input={"tenant": "acme", "schema_version": 7},
)

# Registers the tenant. The API key is not kept in the recorded outputs and
# is stored encrypted in the checkpoint.
# Bump the "rotation" trigger to re-register without changing the input.
registration = LambdaInvocationResource(
    name="tenant-registration",
    function_name="tenant-register",
    qualifier="live",
    input={"tenant": "acme", "api_key": "replace-me"},
    triggers={"rotation": "2024-06"},
    conceal_input=True,
    conceal_result=True,
    finalizer=FinalizerConfig(
        function_name="tenant-unregister",
        qualifier="live",
        input='{"tenant": "acme"}',
    ),
).connect(schema)
