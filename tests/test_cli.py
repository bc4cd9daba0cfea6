# tests/test_cli.py
import pytest

from crossbuild import __version__, cli
from crossbuild.shared.container import container as app_container


@pytest.fixture(autouse=True)
def wired(build_config, runner, monkeypatch):
    """Points the global container at the fake toolchain for every CLI call."""
    monkeypatch.setattr(cli, "setup_observability", lambda: None)
    app_container.build_config.override(build_config)
    app_container.command_runner.override(runner)
    yield
    app_container.reset_override()


class TestParsing:

    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 0
        assert "usage: crossbuild" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(["--version"])

        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out

    @pytest.mark.parametrize("argv", [
        ["build", "--native"],
        ["build", "app.rb"],
        ["build", "--native", "--web", "app.rb"],
        ["launch"],
        ["simulator"],
        ["frobnicate"],
    ])
    def test_usage_errors(self, argv, runner):
        with pytest.raises(SystemExit) as excinfo:
            cli.main(argv)

        assert excinfo.value.code == 2
        assert runner.calls == []


class TestBuild:

    def test_native(self, source_file, build_config, capsys):
        assert cli.main(["build", "--native", str(source_file)]) == 0

        assert "Native app created" in capsys.readouterr().out
        assert (build_config.build_dir / "app").exists()

    def test_web_mentions_page(self, source_file, capsys):
        assert cli.main(["build", "--web", str(source_file)]) == 0
        assert "app.html" in capsys.readouterr().out

    def test_tool_failure_relays_stderr(self, source_file, runner, capsys):
        runner.fail_when("cc", stderr="ld: symbol not found")

        assert cli.main(["build", "--native", str(source_file)]) == 1

        err = capsys.readouterr().err
        assert "exited with code 1" in err
        assert "ld: symbol not found" in err

    def test_missing_source(self, tmp_path, capsys):
        assert cli.main(["build", "--native", str(tmp_path / "nope.rb")]) == 1
        assert "no such file" in capsys.readouterr().err

    def test_all_prints_summary(self, source_file, runner, capsys):
        runner.fail_when("opal", contains="src.rb")

        assert cli.main(["build", "--all", str(source_file)]) == 1

        out = capsys.readouterr().out
        assert "BUILD SUMMARY" in out
        assert "[FAIL] web" in out
        assert out.count("[OK]") == 3

    def test_clean(self, source_file, build_config, capsys):
        cli.main(["build", "--native", str(source_file)])

        assert cli.main(["build", "--clean"]) == 0
        assert not build_config.build_dir.exists()

    def test_all_with_non_utf8_source(self, tmp_path, capsys):
        source = tmp_path / "latin.rb"
        source.write_bytes(b"# encoding: iso-8859-1\nrequire 'ruby2d'\nputs '\xe9t\xe9'\n")

        assert cli.main(["build", "--all", str(source)]) == 0
        assert capsys.readouterr().out.count("[OK]") == 4


class TestLaunchAndTools:

    def test_launch_without_build(self, capsys):
        assert cli.main(["launch", "--native"]) == 1
        assert "Run a build first" in capsys.readouterr().err

    def test_launch_after_build(self, source_file, runner):
        cli.main(["build", "--native", str(source_file)])

        assert cli.main(["launch", "--native"]) == 0
        assert runner.calls[-1].executable == "./app"

    def test_simulator_output_relayed(self, runner, capsys):
        runner.respond("simple2d", "iPhone XR (Booted)")

        assert cli.main(["simulator", "--booted"]) == 0
        assert "iPhone XR (Booted)\n" in capsys.readouterr().out

    def test_simulator_open(self, runner):
        assert cli.main(["simulator", "--open", "iPad Pro"]) == 0
        assert runner.calls[0].args == ("simulator", "--open", "iPad Pro")

    def test_doctor(self, runner, capsys):
        assert cli.main(["doctor"]) == 0

        runner.available.discard("opal")
        assert cli.main(["doctor"]) == 1
        assert "❌ web transpiler (opal) not on PATH" in capsys.readouterr().out
