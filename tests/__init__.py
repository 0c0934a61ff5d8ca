"""
lambdabased Test Suite

- Unit tests for models, invocation and the lifecycle handler
- Provider tests driving full create/update/delete lifecycles
- Tests for the Pulumi compiler, core pipeline and CLI
"""
