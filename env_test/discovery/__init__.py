"""Discovery module - test declarations and name resolution."""

from .registry import RunnableTest, TestSpec, declared_specs, test
from .resolver import DEFAULT_NAMESPACE, collect_tests, expand_name, resolve, resolve_target

__all__ = [
    "RunnableTest",
    "TestSpec",
    "declared_specs",
    "test",
    "DEFAULT_NAMESPACE",
    "collect_tests",
    "expand_name",
    "resolve",
    "resolve_target",
]
