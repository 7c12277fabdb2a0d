import pytest

from ssrdeploy.datacls import BuildOutput, FunctionDescriptor
from ssrdeploy.exceptions import CommandFailedError
from ssrdeploy.process import CommandResult


class RecordingRunner:
    """Stands in for run_command; records calls and fails on request."""

    def __init__(self, fail_on=None, events=None):
        self.calls = []
        self.fail_on = set(fail_on or ())
        self.events = events if events is not None else []

    async def __call__(self, command, cwd=None, env=None, stage=None):
        self.calls.append(command)
        self.events.append(("run", command))
        if command in self.fail_on:
            raise CommandFailedError(command, 1, "boom", stage=stage)
        return CommandResult(command=command, returncode=0)


class FakeBuilder:
    def __init__(self, functions=None, events=None, error=None):
        if functions is None:
            functions = [FunctionDescriptor(source="/tmp/fn", entry="index.handler", name="ssr")]
        self.functions = functions
        self.events = events if events is not None else []
        self.error = error
        self.build_calls = []
        self.cleaned = 0

    async def build(self, entry, options):
        self.events.append(("build", entry))
        self.build_calls.append((entry, dict(options)))
        if self.error:
            raise self.error
        return BuildOutput(functions=self.functions)

    async def clean(self):
        self.events.append(("clean",))
        self.cleaned += 1


class FakePackager:
    def __init__(self, config, context=None, fail_deploy=False, events=None):
        self.config = config
        self.context = context
        self.fail_deploy = fail_deploy
        self.events = events if events is not None else []
        self.compiled = 0
        self.deployed = 0

    async def compile(self):
        self.events.append(("compile",))
        self.compiled += 1
        return {"artifact": self.config.function_root_path}

    async def deploy(self):
        self.events.append(("deploy",))
        if self.fail_deploy:
            raise RuntimeError("deploy rejected")
        self.deployed += 1


@pytest.fixture
def events():
    return []


@pytest.fixture
def runner(events):
    return RecordingRunner(events=events)


@pytest.fixture
def fake_builder(events):
    return FakeBuilder(events=events)


@pytest.fixture
def packagers(events):
    """Packager factory that remembers the packagers it created."""
    created = []

    def factory(config, context):
        packager = FakePackager(config, context, events=events)
        created.append(packager)
        return packager

    factory.created = created
    return factory
