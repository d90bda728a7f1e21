"""Decide whether a test runs on the detected environment."""

from typing import AbstractSet, Optional

from ..discovery.registry import TestSpec
from ..environment.platform import Environment
from .result import SkipReason


def is_eligible(spec: TestSpec, env: Environment) -> bool:
    """Check a test declaration against the environment.

    Every constraint must hold; an empty constraint matches anything.
    """
    if not spec.enabled:
        return False

    if spec.os and env.os not in spec.os:
        return False

    if spec.arch and env.arch not in spec.arch:
        return False

    if spec.jvm and env.jvm not in spec.jvm:
        return False

    bounds = spec.version_range
    if bounds is not None and not bounds[0] <= env.version <= bounds[1]:
        return False

    return True


def in_skip_list(spec: TestSpec, skip: AbstractSet[str]) -> bool:
    """Whether the declaring class or the function is named in ``skip``.

    ``skip`` holds lowercased names.
    """
    return spec.class_name.lower() in skip or spec.method_name.lower() in skip


def skip_reason(
    spec: TestSpec, env: Environment, skip: AbstractSet[str]
) -> Optional[SkipReason]:
    """Reason to skip the test, or None if it should run."""
    if in_skip_list(spec, skip):
        return SkipReason.SKIP_LIST
    if not is_eligible(spec, env):
        return SkipReason.INELIGIBLE
    return None
