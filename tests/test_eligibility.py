import itertools

import pytest

from env_test.config import parse_skip_list
from env_test.discovery import TestSpec
from env_test.environment import Arch, Environment, Jvm, Os
from env_test.runner import SkipReason, in_skip_list, is_eligible, skip_reason

ALL_ENVIRONMENTS = [
    Environment(os=os_type, arch=arch, jvm=jvm, version=version)
    for os_type, arch, jvm, version in itertools.product(Os, Arch, Jvm, (7, 8, 11, 17, 21))
]


@pytest.mark.parametrize("env", ALL_ENVIRONMENTS, ids=str)
def test_unconstrained_matches_everything(env):
    assert is_eligible(TestSpec(), env)


@pytest.mark.parametrize("env", ALL_ENVIRONMENTS, ids=str)
def test_disabled_matches_nothing(env):
    spec = TestSpec(
        enabled=False,
        os=frozenset([env.os]),
        arch=frozenset([env.arch]),
        jvm=frozenset([env.jvm]),
        jvm_ver=(env.version,),
    )
    assert not is_eligible(spec, env)


def test_os_constraint(linux_env):
    assert is_eligible(TestSpec(os=frozenset([Os.LINUX, Os.MACOS])), linux_env)
    assert not is_eligible(TestSpec(os=frozenset([Os.WINDOWS])), linux_env)


def test_arch_constraint(linux_env):
    assert is_eligible(TestSpec(arch=frozenset([Arch.X64])), linux_env)
    assert not is_eligible(TestSpec(arch=frozenset([Arch.ARM64, Arch.X86])), linux_env)


def test_jvm_constraint(linux_env):
    assert is_eligible(TestSpec(jvm=frozenset([Jvm.HOTSPOT])), linux_env)
    assert not is_eligible(TestSpec(jvm=frozenset([Jvm.OPENJ9, Jvm.ZING])), linux_env)


def test_constraints_are_combined(linux_env):
    spec = TestSpec(os=frozenset([Os.LINUX]), jvm=frozenset([Jvm.OPENJ9]))
    assert not is_eligible(spec, linux_env)


@pytest.mark.parametrize("version, eligible", [
    (10, False),
    (11, True),
    (14, True),
    (17, True),
    (18, False),
])
def test_version_range_is_inclusive(version, eligible):
    env = Environment(os=Os.LINUX, arch=Arch.X64, jvm=Jvm.HOTSPOT, version=version)
    assert is_eligible(TestSpec(jvm_ver=(11, 17)), env) is eligible


def test_version_range_uses_first_and_last_only():
    env = Environment(os=Os.LINUX, arch=Arch.X64, jvm=Jvm.HOTSPOT, version=15)
    assert is_eligible(TestSpec(jvm_ver=(11, 13, 17)), env)


def test_single_version():
    spec = TestSpec(jvm_ver=(8,))
    assert is_eligible(spec, Environment(Os.LINUX, Arch.X64, Jvm.HOTSPOT, 8))
    assert not is_eligible(spec, Environment(Os.LINUX, Arch.X64, Jvm.HOTSPOT, 9))


def test_parse_skip_list():
    assert parse_skip_list("FooTests, cpuProfile,,") == {"footests", "cpuprofile"}
    assert parse_skip_list("") == frozenset()
    assert parse_skip_list(None) == frozenset()


@pytest.mark.parametrize("skip, skipped", [
    ("footests", True),
    ("FOOTESTS", True),
    ("cpu_profile", True),
    ("CPU_Profile", True),
    ("othertests,alloc", False),
    ("", False),
])
def test_skip_list_matches_class_or_method(skip, skipped):
    spec = TestSpec(class_name="FooTests", method_name="cpu_profile")
    assert in_skip_list(spec, parse_skip_list(skip)) is skipped


def test_skip_reason(linux_env):
    spec = TestSpec(class_name="FooTests", method_name="run", os=frozenset([Os.WINDOWS]))

    assert skip_reason(spec, linux_env, frozenset()) == SkipReason.INELIGIBLE
    assert skip_reason(spec, linux_env, {"run"}) == SkipReason.SKIP_LIST

    eligible = TestSpec(class_name="FooTests", method_name="run")
    assert skip_reason(eligible, linux_env, frozenset()) is None
    assert skip_reason(eligible, linux_env, {"footests"}) == SkipReason.SKIP_LIST
