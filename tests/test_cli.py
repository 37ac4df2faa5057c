from click.testing import CliRunner

from zine import __version__
from zine.build import BuildResult
from zine.cli import cli
from zine.content import Zine


def test_cli_new_scaffolds_project(tmp_path):
    runner = CliRunner()
    target = tmp_path / "myzine"
    result = runner.invoke(cli, ["new", str(target)])
    assert result.exit_code == 0
    assert (target / "zine.toml").exists()
    assert (target / "footer.html").exists()
    assert (target / "content" / "season-1" / "zine.toml").exists()
    assert (target / "pages" / "about.md").exists()

    # fails on non-empty directory
    result = runner.invoke(cli, ["new", str(target)])
    assert result.exit_code != 0


def test_scaffolded_project_builds(tmp_path):
    runner = CliRunner()
    target = tmp_path / "myzine"
    runner.invoke(cli, ["new", str(target)])
    result = runner.invoke(cli, ["build", str(target)], catch_exceptions=False)
    assert result.exit_code == 0
    assert "Built 1 seasons, 1 articles and 1 pages" in result.output
    out = target / "build"
    assert (out / "index.html").exists()
    assert (out / "s1" / "1-hello-world.html").exists()
    assert (out / "page" / "about" / "index.html").exists()
    assert (out / "static" / "style.css").exists()
    assert "Built with zine." in (out / "index.html").read_text(encoding="utf-8")


def test_cli_build_reports_errors(tmp_path):
    runner = CliRunner()
    target = tmp_path / "myzine"
    runner.invoke(cli, ["new", str(target)])
    (target / "content" / "season-1" / "1-hello-world.md").unlink()
    result = runner.invoke(cli, ["build", str(target)])
    assert result.exit_code == 1
    assert "Build failed:" in result.output
    assert "1-hello-world.md" in result.output
    assert "File not found" in result.output


def test_cli_build_dest_and_serve(monkeypatch, tmp_path):
    runner = CliRunner()
    called = {}

    def fake_build_zine(source, dest=None):
        called["dest"] = dest
        dest.mkdir()
        return BuildResult(zine=Zine(), output_dir=dest)

    class DummyServer:
        def __init__(self, source, http_port=3000, ws_port=None):
            called["port"] = http_port
            called["ws_port"] = ws_port

        def start(self):
            called["started"] = True

    monkeypatch.setattr("zine.build.build_zine", fake_build_zine)
    monkeypatch.setattr("zine.server.DevServer", DummyServer)

    result = runner.invoke(
        cli, ["build", str(tmp_path), "--dest", str(tmp_path / "site")], catch_exceptions=False
    )
    assert result.exit_code == 0
    assert called["dest"] == tmp_path / "site"
    assert "Built 0 seasons" in result.output

    result = runner.invoke(
        cli, ["serve", str(tmp_path), "--port", "5050", "--ws-port", "5051"], catch_exceptions=False
    )
    assert result.exit_code == 0
    assert called == {"dest": tmp_path / "site", "port": 5050, "ws_port": 5051, "started": True}


def test_version_option():
    result = CliRunner().invoke(cli, ["--version"])
    assert __version__ in result.output


def test_module_main_entrypoint():
    from zine.__main__ import main

    assert callable(main)
