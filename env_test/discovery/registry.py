"""Test declaration metadata.

The ``@test`` decorator attaches a ``TestSpec`` to a function. A function may
carry several declarations; each one becomes its own test case.
"""

from dataclasses import dataclass, field, replace
from types import ModuleType
from typing import Any, Callable, Iterable, Optional, Union

from ..environment.platform import Arch, Jvm, Os

SPECS_ATTR = "__env_test_specs__"


@dataclass(frozen=True)
class TestSpec:
    """Eligibility constraints and launch parameters of one test case.

    Empty ``os``/``arch``/``jvm`` sets and an empty ``jvm_ver`` tuple match
    every environment. ``jvm_ver`` holds sorted boundary values; only the
    first and last are used, as an inclusive range.
    """
    __test__ = False

    enabled: bool = True
    os: frozenset[Os] = field(default_factory=frozenset)
    arch: frozenset[Arch] = field(default_factory=frozenset)
    jvm: frozenset[Jvm] = field(default_factory=frozenset)
    jvm_ver: tuple[int, ...] = ()
    main_class: str = ""
    args: str = ""
    jvm_args: str = ""
    agent_args: str = ""
    name_suffix: str = ""
    class_name: str = ""
    method_name: str = ""

    @property
    def version_range(self) -> Optional[tuple[int, int]]:
        """Inclusive (min, max) JVM version bounds, or None if unconstrained."""
        if not self.jvm_ver:
            return None
        return self.jvm_ver[0], self.jvm_ver[-1]

    @property
    def test_name(self) -> str:
        """Filesystem-safe name, used for per-test log directories."""
        name = f"{self.class_name}.{self.method_name}"
        if self.name_suffix:
            name += f"-{self.name_suffix}"
        return name

    @property
    def display_name(self) -> str:
        name = f"{self.class_name}.{self.method_name}"
        if self.name_suffix:
            name += f" {self.name_suffix}"
        if self.args:
            name += f" ({self.args})"
        return name

    def bind(self, class_name: str, method_name: str) -> "TestSpec":
        """Copy of this spec identified by its declaring class and function."""
        return replace(self, class_name=class_name, method_name=method_name)


@dataclass(frozen=True)
class RunnableTest:
    """A test declaration paired with the callable that implements it."""
    spec: TestSpec
    function: Callable[..., Any]
    owner: Union[type, ModuleType]
    instance_bound: bool = False

    @property
    def class_name(self) -> str:
        return self.spec.class_name

    @property
    def method_name(self) -> str:
        return self.spec.method_name

    @property
    def test_name(self) -> str:
        return self.spec.test_name

    @property
    def display_name(self) -> str:
        return self.spec.display_name


def _as_set(values, enum_type) -> frozenset:
    if values is None:
        return frozenset()
    if isinstance(values, (str, enum_type)):
        values = [values]
    return frozenset(enum_type(v) for v in values)


def _as_versions(values: Union[int, Iterable[int], None]) -> tuple[int, ...]:
    if values is None:
        return ()
    if isinstance(values, int):
        return (values,)
    return tuple(sorted({int(v) for v in values}))


def test(
    *,
    enabled: bool = True,
    os=None,
    arch=None,
    jvm=None,
    jvm_ver: Union[int, Iterable[int], None] = None,
    main_class: str = "",
    args: str = "",
    jvm_args: str = "",
    agent_args: str = "",
    name_suffix: str = "",
) -> Callable:
    """Declare a test case.

    Args:
        enabled: False excludes the test everywhere.
        os: Os value(s) the test runs on. None = all.
        arch: Arch value(s) the test runs on. None = all.
        jvm: Jvm value(s) the test runs on. None = all.
        jvm_ver: JVM versions; the smallest and largest form an inclusive range.
        main_class: Java class launched in the test's child JVM, if any.
        args: Arguments for ``main_class``.
        jvm_args: Extra JVM options for the child JVM.
        agent_args: Options passed to the agent library.
        name_suffix: Distinguishes several declarations on one function.

    Usage:
        @test(os=Os.LINUX, jvm_ver=(11, 21))
        def cpu_profile(self, p): ...
    """
    spec = TestSpec(
        enabled=enabled,
        os=_as_set(os, Os),
        arch=_as_set(arch, Arch),
        jvm=_as_set(jvm, Jvm),
        jvm_ver=_as_versions(jvm_ver),
        main_class=main_class,
        args=args,
        jvm_args=jvm_args,
        agent_args=agent_args,
        name_suffix=name_suffix,
    )

    def decorator(obj):
        func = obj.__func__ if isinstance(obj, staticmethod) else obj
        specs = func.__dict__.setdefault(SPECS_ATTR, [])
        # Decorators apply bottom-up; keep source order
        specs.insert(0, spec)
        return obj

    return decorator


def declared_specs(obj) -> list[TestSpec]:
    """Declarations attached to a function (or staticmethod), in source order."""
    func = obj.__func__ if isinstance(obj, staticmethod) else obj
    return list(getattr(func, SPECS_ATTR, ()))


# Keep pytest from collecting the decorator where it is imported
test.__test__ = False
