import asyncio
import json
import zipfile
from pathlib import Path

import pytest
import yaml

from ssrdeploy.bases import LocalFunctionPackager, NuxtBuilder
from ssrdeploy.builder import ArtifactAdapter
from ssrdeploy.config import resolve_inputs
from ssrdeploy.datacls import BuildOutput, FunctionDescriptor, PluginContext
from ssrdeploy.exceptions import PackagingError, SSRBuildError


@pytest.fixture
def nuxt_project(tmp_path: Path) -> Path:
    """A Nuxt project that has already been built."""
    project = tmp_path / "project"
    (project / ".nuxt" / "dist").mkdir(parents=True)
    (project / ".nuxt" / "dist" / "server.js").write_text("// server bundle")
    (project / "static").mkdir()
    (project / "static" / "favicon.ico").write_text("ico")
    (project / "nuxt.config.js").write_text("module.exports = {}")
    (project / "package.json").write_text(json.dumps({"name": "site", "dependencies": {"nuxt": "^2.14.0"}}))
    return project


def _packaging(source, **inputs):
    output = BuildOutput(functions=[FunctionDescriptor(source=str(source), entry="index.main", name="ssr")])
    return ArtifactAdapter().adapt(output, resolve_inputs(inputs))


class TestNuxtBuilder:

    def test_build_prepares_function_directory(self, nuxt_project):
        builder = NuxtBuilder(nuxt_project)
        output = asyncio.run(builder.build("./", {"name": "nuxt-ssr", "path": "/nuxt-ssr"}))

        assert len(output.functions) == 1
        fn = output.functions[0]
        assert fn.name == "nuxt-ssr"
        assert fn.entry == "index.main"
        source = Path(fn.source)
        assert (source / ".nuxt" / "dist" / "server.js").is_file()
        assert (source / "static" / "favicon.ico").is_file()
        assert (source / "nuxt.config.js").is_file()
        assert 'base: "/nuxt-ssr/"' in (source / "index.js").read_text()

        manifest = json.loads((source / "package.json").read_text())
        assert manifest["dependencies"]["nuxt"] == "^2.14.0"
        assert "serverless-http" in manifest["dependencies"]

    def test_clean_removes_temporaries(self, nuxt_project):
        builder = NuxtBuilder(nuxt_project)
        output = asyncio.run(builder.build("./", {"name": "ssr", "path": "/"}))
        source = Path(output.functions[0].source)
        assert source.exists()

        asyncio.run(builder.clean())
        assert not source.exists()
        assert not source.parent.exists()

    def test_missing_build_output(self, tmp_path):
        with pytest.raises(SSRBuildError, match="No '.nuxt' build output"):
            asyncio.run(NuxtBuilder(tmp_path).build("./", {"name": "ssr", "path": "/"}))

    def test_missing_entry_directory(self, tmp_path):
        with pytest.raises(SSRBuildError, match="does not exist"):
            asyncio.run(NuxtBuilder(tmp_path).build("nope", {"name": "ssr", "path": "/"}))


class TestLocalFunctionPackager:

    @pytest.mark.parametrize("inputs, message", [
        ({"runtime": "Python3.6"}, "unsupported runtime"),
        ({"memory": 100}, "unsupported memory"),
        ({"timeout": 0}, "outside 1-60s"),
        ({"timeout": 61}, "outside 1-60s"),
    ])
    def test_rejects_out_of_range_values(self, tmp_path, inputs, message):
        with pytest.raises(PackagingError, match=message):
            LocalFunctionPackager(_packaging(tmp_path, **inputs), PluginContext(project_path=tmp_path))

    def test_fractional_timeout_in_range(self, tmp_path):
        packager = LocalFunctionPackager(_packaging(tmp_path, timeout=2.5), PluginContext(project_path=tmp_path))
        assert packager.config.functions[0].timeout == 2.5

    def test_compile_returns_manifest(self, tmp_path):
        context = PluginContext(project_path=tmp_path, env_id="dev-1")
        manifest = asyncio.run(LocalFunctionPackager(_packaging(tmp_path), context).compile())
        assert manifest["envId"] == "dev-1"
        assert manifest["functionRootPath"] == str(tmp_path)
        assert manifest["servicePaths"] == {"nuxt-ssr": "/nuxt-ssr"}
        assert manifest["archives"] == {"ssr": "ssr.zip"}

    def test_compile_requires_function_root(self, tmp_path):
        packager = LocalFunctionPackager(_packaging(tmp_path / "gone"), PluginContext(project_path=tmp_path))
        with pytest.raises(PackagingError, match="does not exist"):
            asyncio.run(packager.compile())

    def test_deploy_writes_archive_and_manifest(self, tmp_path):
        root = tmp_path / "fn"
        root.mkdir()
        (root / "index.js").write_text("exports.main = () => {}")
        out = tmp_path / "out"
        packager = LocalFunctionPackager(_packaging(root), PluginContext(project_path=tmp_path, output_dir=out))

        asyncio.run(packager.deploy())

        with zipfile.ZipFile(out / "ssr.zip") as archive:
            assert "index.js" in archive.namelist()
        manifest = yaml.safe_load((out / "function.yml").read_text())
        assert manifest["functions"][0]["installDependency"] is True

    def test_default_output_dir(self, tmp_path):
        packager = LocalFunctionPackager(_packaging(tmp_path), PluginContext(project_path=tmp_path))
        assert packager.output_dir == tmp_path / ".ssrdeploy"
