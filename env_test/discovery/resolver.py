"""Resolve test-group names into an ordered list of runnable tests.

A name is either fully qualified (``suites.cpu.CpuTests``) or a short
lowercase name (``cpu``) expanded by convention to
``<namespace>.cpu.CpuTests``.
"""

import importlib
import inspect
import logging
from types import ModuleType
from typing import Iterable, Union

from ..errors import DiscoveryError
from .registry import RunnableTest, declared_specs

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "suites"
CLASS_SUFFIX = "Tests"


def expand_name(name: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    """Expand a short test-group name into a fully qualified one.

    ``cpu`` -> ``suites.cpu.CpuTests``; ``alloc_heap`` -> ``suites.alloc_heap.Alloc_heapTests``.
    Names containing a dot or starting with an uppercase letter are returned as-is.
    """
    if not name or "." in name or not name[0].islower():
        return name
    return f"{namespace}.{name}.{name[0].upper()}{name[1:]}{CLASS_SUFFIX}"


def resolve_target(qualified: str) -> Union[type, ModuleType]:
    """Import the class or module named by ``qualified``.

    Raises:
        DiscoveryError: If nothing importable has that name.
    """
    if not qualified or any(not part.isidentifier() for part in qualified.split(".")):
        raise DiscoveryError(f"Invalid test group name: {qualified!r}")

    try:
        return importlib.import_module(qualified)
    except ImportError as e:
        # Only a missing module at exactly this path means "try as attribute"
        if getattr(e, "name", None) != qualified:
            raise DiscoveryError(f"Cannot import {qualified}: {e}") from e
    except Exception as e:
        raise DiscoveryError(f"Cannot import {qualified}: {e}") from e

    module_name, _, attr = qualified.rpartition(".")
    if not module_name:
        raise DiscoveryError(f"Test group not found: {qualified}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise DiscoveryError(f"Test group not found: {qualified} ({e})") from e
    except Exception as e:
        raise DiscoveryError(f"Cannot import {module_name}: {e}") from e

    target = getattr(module, attr, None)
    if not (inspect.isclass(target) or inspect.ismodule(target)):
        raise DiscoveryError(f"Test group not found: {qualified}")
    return target


def _class_members(cls: type) -> list[tuple[str, object]]:
    """Attributes of ``cls`` in definition order, base classes first."""
    names: dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name in vars(klass):
            names.setdefault(name)
    # Look up through the MRO so overrides win, at the base's position
    members = []
    for name in names:
        for klass in cls.__mro__:
            if name in vars(klass):
                members.append((name, vars(klass)[name]))
                break
    return members


def collect_tests(target: Union[type, ModuleType]) -> list[RunnableTest]:
    """Collect every declared test of a class or module, in definition order."""
    tests: list[RunnableTest] = []

    if inspect.isclass(target):
        owner_name = target.__name__
        for name, member in _class_members(target):
            if isinstance(member, staticmethod):
                function, instance_bound = member.__func__, False
            elif inspect.isfunction(member):
                function, instance_bound = member, True
            else:
                continue
            for spec in declared_specs(function):
                tests.append(RunnableTest(
                    spec=spec.bind(owner_name, name),
                    function=function,
                    owner=target,
                    instance_bound=instance_bound,
                ))
        return tests

    owner_name = target.__name__.rpartition(".")[2]
    for name, member in vars(target).items():
        # Skip functions re-exported from other modules
        if not inspect.isfunction(member) or member.__module__ != target.__name__:
            continue
        for spec in declared_specs(member):
            tests.append(RunnableTest(
                spec=spec.bind(owner_name, name),
                function=member,
                owner=target,
            ))
    return tests


def resolve(names: Iterable[str], namespace: str = DEFAULT_NAMESPACE) -> list[RunnableTest]:
    """Resolve test-group names into runnable tests, in input order.

    Raises:
        DiscoveryError: On the first name that cannot be resolved.
    """
    tests: list[RunnableTest] = []
    for name in names:
        qualified = expand_name(name, namespace)
        target = resolve_target(qualified)
        found = collect_tests(target)
        logger.debug("%s: %d test(s)", qualified, len(found))
        tests.extend(found)
    return tests
