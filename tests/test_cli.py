"""
CLI: container:list and event:list against an application module.
"""

import textwrap

import pytest
from click.testing import CliRunner

from orchestr.cli.__main__ import cli


APP_MODULE = textwrap.dedent("""
    from orchestr import Application

    app = Application()
    app.singleton("mailer", lambda c: object())
    app.alias("mailer", "mail")


    def audit(*args):
        pass


    app.make("events").listen("user.*", audit)


    def create_app():
        return app
""")


@pytest.fixture
def app_module(tmp_path, monkeypatch, request):
    name = f"cli_app_{request.node.name}"
    (tmp_path / f"{name}.py").write_text(APP_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return name


class TestContainerList:

    def test_lists_bindings_instances_and_aliases(self, app_module):
        result = CliRunner().invoke(cli, ["container:list", "--app", f"{app_module}:app"])
        assert result.exit_code == 0, result.output
        assert "mailer" in result.output
        assert "mail" in result.output
        assert "alias" in result.output
        assert "events" in result.output

    def test_factory_reference(self, app_module):
        result = CliRunner().invoke(cli, ["container:list", "--app", f"{app_module}:create_app"])
        assert result.exit_code == 0, result.output
        assert "instance" in result.output

    def test_bad_reference(self):
        result = CliRunner().invoke(cli, ["container:list", "--app", "no-colon"])
        assert result.exit_code == 1
        assert "Failed to inspect container" in result.output


class TestEventList:

    def test_lists_listeners(self, app_module):
        result = CliRunner().invoke(cli, ["event:list", "--app", f"{app_module}:app"])
        assert result.exit_code == 0, result.output
        assert "user.*" in result.output
        assert "audit" in result.output

    def test_filters_by_event(self, app_module):
        result = CliRunner().invoke(
            cli, ["event:list", "--app", f"{app_module}:app", "--event", "order.placed"]
        )
        assert result.exit_code == 0, result.output
        assert "No listeners registered" in result.output


class TestHelp:

    def test_banner(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Orchestr" in result.output
        assert "container:list" in result.output
