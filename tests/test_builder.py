import asyncio

import pytest

from conftest import FakeBuilder, FakePackager, RecordingRunner
from ssrdeploy.builder import ArtifactAdapter, BuildExecutor, DependencyInstaller, DeploymentCoordinator
from ssrdeploy.config import resolve_inputs
from ssrdeploy.datacls import BuildOutput, FunctionDescriptor
from ssrdeploy.exceptions import BuildOutputError, CommandFailedError, EmptyBuildOutputError


class TestDependencyInstaller:

    def test_manifest_lives_in_project_directory(self, tmp_path, runner):
        assert DependencyInstaller(tmp_path, runner).manifest == tmp_path / "package.json"

    def test_no_manifest_spawns_nothing(self, tmp_path, runner):
        installer = DependencyInstaller(tmp_path, runner)
        assert asyncio.run(installer.maybe_install("npm install")) is False
        assert runner.calls == []

    def test_manifest_triggers_install(self, tmp_path, runner):
        (tmp_path / "package.json").write_text("{}")
        installer = DependencyInstaller(tmp_path, runner)
        assert asyncio.run(installer.maybe_install("npm ci")) is True
        assert runner.calls == ["npm ci"]

    def test_empty_command_is_skipped(self, tmp_path, runner):
        (tmp_path / "package.json").write_text("{}")
        assert asyncio.run(DependencyInstaller(tmp_path, runner).maybe_install("")) is False
        assert runner.calls == []

    def test_install_failure_propagates(self, tmp_path):
        (tmp_path / "package.json").write_text("{}")
        failing = RecordingRunner(fail_on={"npm install"})
        with pytest.raises(CommandFailedError, match="exited with code 1 during 'init'"):
            asyncio.run(DependencyInstaller(tmp_path, failing).maybe_install("npm install", stage="init"))
        assert failing.calls == ["npm install"]


class TestBuildExecutor:

    def test_command_runs_before_builder(self, tmp_path, events, runner, fake_builder):
        executor = BuildExecutor(fake_builder, tmp_path, runner)
        output = asyncio.run(executor.build(resolve_inputs({"entry": "web", "name": "blog", "path": "/blog"})))

        assert events == [("run", "npm run build"), ("build", "web")]
        assert fake_builder.build_calls == [("web", {"name": "blog", "path": "/blog"})]
        assert output.functions[0].name == "ssr"

    def test_no_build_command_goes_straight_to_builder(self, tmp_path, events, runner, fake_builder):
        executor = BuildExecutor(fake_builder, tmp_path, runner)
        asyncio.run(executor.build(resolve_inputs({"buildCommand": ""})))
        assert runner.calls == []
        assert events == [("build", "./")]

    def test_failed_command_skips_builder(self, tmp_path, events, fake_builder):
        failing = RecordingRunner(fail_on={"npm run build"}, events=events)
        executor = BuildExecutor(fake_builder, tmp_path, failing)
        with pytest.raises(CommandFailedError):
            asyncio.run(executor.build(resolve_inputs({})))
        assert fake_builder.build_calls == []

    def test_builder_error_propagates_verbatim(self, tmp_path, runner):
        error = ValueError("nuxt exploded")
        executor = BuildExecutor(FakeBuilder(error=error), tmp_path, runner)
        with pytest.raises(ValueError) as info:
            asyncio.run(executor.build(resolve_inputs({})))
        assert info.value is error

    def test_mapping_output_is_coerced(self, tmp_path, runner):
        class DictBuilder(FakeBuilder):
            async def build(self, entry, options):
                return {"functions": [{"source": "/s", "entry": "index.main", "name": "fn"}]}

        output = asyncio.run(BuildExecutor(DictBuilder(), tmp_path, runner).build(resolve_inputs({})))
        assert output == BuildOutput(functions=[FunctionDescriptor(source="/s", entry="index.main", name="fn")])

    def test_malformed_output_raises(self, tmp_path, runner):
        class BadBuilder(FakeBuilder):
            async def build(self, entry, options):
                return {"fns": []}

        with pytest.raises(BuildOutputError, match="malformed build output"):
            asyncio.run(BuildExecutor(BadBuilder(), tmp_path, runner).build(resolve_inputs({})))


class TestArtifactAdapter:

    def test_adapts_primary_function(self):
        output = BuildOutput(functions=[FunctionDescriptor(source="/tmp/fn", entry="index.handler", name="ssr")])
        config = resolve_inputs({
            "name": "nuxt-ssr", "path": "/nuxt-ssr", "runtime": "Nodejs10.15",
            "memory": 128, "timeout": 5, "envVariables": {},
        })
        packaging = ArtifactAdapter().adapt(output, config)
        assert packaging.dump() == {
            "functionRootPath": "/tmp/fn",
            "functions": [{
                "name": "ssr",
                "handler": "index.handler",
                "runtime": "Nodejs10.15",
                "installDependency": True,
                "memory": 128,
                "timeout": 5,
                "envVariables": {},
            }],
            "servicePaths": {"nuxt-ssr": "/nuxt-ssr"},
        }

    def test_only_first_descriptor_is_used(self):
        output = BuildOutput(functions=[
            FunctionDescriptor(source="/a", entry="a.main", name="a"),
            FunctionDescriptor(source="/b", entry="b.main", name="b"),
        ])
        packaging = ArtifactAdapter().adapt(output, resolve_inputs({"envVariables": {"K": "v"}}))
        assert packaging.function_root_path == "/a"
        assert [fn.name for fn in packaging.functions] == ["a"]
        assert packaging.functions[0].env_variables == {"K": "v"}

    def test_empty_output_fails(self):
        with pytest.raises(EmptyBuildOutputError):
            ArtifactAdapter().adapt(BuildOutput(functions=[]), resolve_inputs({}))

    def test_empty_output_is_an_index_error(self):
        with pytest.raises(IndexError):
            ArtifactAdapter().adapt(BuildOutput(functions=[]), resolve_inputs({}))


class TestDeploymentCoordinator:

    def _packaging(self):
        output = BuildOutput(functions=[FunctionDescriptor(source="/tmp/fn", entry="index.main", name="ssr")])
        return ArtifactAdapter().adapt(output, resolve_inputs({}))

    def test_deploy_then_clean(self, events, fake_builder):
        packager = FakePackager(self._packaging(), events=events)
        asyncio.run(DeploymentCoordinator(fake_builder).deploy(packager, name="nuxt-ssr"))
        assert events == [("deploy",), ("clean",)]

    def test_failed_deploy_prevents_cleanup(self, events, fake_builder):
        packager = FakePackager(self._packaging(), fail_deploy=True, events=events)
        with pytest.raises(RuntimeError, match="deploy rejected"):
            asyncio.run(DeploymentCoordinator(fake_builder).deploy(packager))
        assert fake_builder.cleaned == 0
        assert events == [("deploy",)]
