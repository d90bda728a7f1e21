import pytest

from env_test.environment import Arch, Environment, Jvm, Os


class FakeContext:
    """Stands in for TestProcess; records its lifecycle."""

    def __init__(self, spec, os_type, log_dir, events):
        self.spec = spec
        self.os_type = os_type
        self.log_dir = log_dir
        self.events = events
        self.closed = False

    def __enter__(self):
        self.events.append(("open", self.spec.method_name))
        return self

    def __exit__(self, *args):
        self.closed = True
        self.events.append(("close", self.spec.method_name))


@pytest.fixture
def linux_env():
    return Environment(os=Os.LINUX, arch=Arch.X64, jvm=Jvm.HOTSPOT, version=17)


@pytest.fixture
def context_events():
    return []


@pytest.fixture
def fake_context(context_events):
    created = []

    def factory(spec, os_type, log_dir):
        context = FakeContext(spec, os_type, log_dir, context_events)
        created.append(context)
        return context

    factory.created = created
    return factory


@pytest.fixture(autouse=True)
def reset_sample_state():
    from sample_suites import bar

    bar.CALLS.clear()
    bar.BarTests.instances = 0
    yield
