"""
Unit tests for ledger.bootstrap and the management commands built on it.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from django.apps import apps
from django.core.management import CommandError, call_command

from ledger.bootstrap import bootstrap
from ledger.mediator import TransactionMediator
from ledger.profile import read_connection_profile


class StubContract:
    def submit_transaction(self, function, *args):
        return b"tx"

    def evaluate_transaction(self, function, *args):
        return b"{}"


class StubGateway:
    @classmethod
    def connect(cls, profile, identity):
        gateway = cls()
        gateway.profile = profile
        return gateway

    def get_network(self, channel):
        return self

    def get_contract(self, name):
        return StubContract()


@pytest.fixture()
def exit_hooks(monkeypatch):
    hooks = []
    monkeypatch.setattr("ledger.bootstrap.atexit.register", hooks.append)
    return hooks


@pytest.fixture()
def ledger_app(exit_hooks):
    app_config = apps.get_app_config("ledger")
    app_config.mediator = None
    yield app_config
    app_config.mediator = None


@pytest.fixture()
def options(tmp_path, wallet_dir):
    return {
        "WALLET_PATH": str(wallet_dir("appUser")),
        "CONNECTION_PROFILE": str(tmp_path / "profile.yaml"),
        "CHANNEL": "mychannel",
        "GATEWAY_URL": "http://fresh.gateway",
        "TLS_CERT_PATH": "",
        "REGENERATE_CONFIG": False,
        "GATEWAY_CLASS": f"{__name__}.StubGateway",
    }


class TestBootstrap:
    def test_installs_mediator(self, ledger_app, options):
        mediator = bootstrap(options)

        assert isinstance(mediator, TransactionMediator)
        assert ledger_app.mediator is mediator
        assert mediator.session.channel == "mychannel"

    def test_is_idempotent(self, ledger_app, options):
        first = bootstrap(options)
        second = bootstrap({**options, "IDENTITY_LABEL": "ghost"})

        assert first is second

    def test_startup_failure_exits_without_installing(self, ledger_app, options):
        options["IDENTITY_LABEL"] = "ghost"

        with pytest.raises(SystemExit) as exc_info:
            bootstrap(options)

        assert exc_info.value.code == 1
        assert ledger_app.mediator is None

    def test_forced_regeneration_overwrites_profile(self, ledger_app, options, tmp_path):
        profile_path = tmp_path / "profile.yaml"
        profile_path.write_text("client:\n  gateway:\n    url: http://stale.gateway\n")

        bootstrap({**options, "REGENERATE_CONFIG": True})

        profile = read_connection_profile(profile_path)
        assert profile["client"]["gateway"]["url"] == "http://fresh.gateway"

    def test_existing_profile_kept_without_regeneration(self, ledger_app, options, tmp_path):
        profile_path = tmp_path / "profile.yaml"
        profile_path.write_text("client:\n  gateway:\n    url: http://stale.gateway\n")

        bootstrap(options)

        assert read_connection_profile(profile_path)["client"]["gateway"]["url"] == "http://stale.gateway"

    def test_session_closed_at_exit(self, ledger_app, options, exit_hooks):
        bootstrap(options)
        bootstrap(options)

        assert exit_hooks == [ledger_app.uninstall]
        exit_hooks[0]()
        assert ledger_app.mediator is None

    def test_failure_registers_no_exit_hook(self, ledger_app, options, exit_hooks):
        with pytest.raises(SystemExit):
            bootstrap({**options, "IDENTITY_LABEL": "ghost"})

        assert exit_hooks == []

    def test_misshaped_identity_file_is_fatal(self, ledger_app, options, caplog):
        (Path(options["WALLET_PATH"]) / "appUser.id").write_text('{"credentials": "pem-string"}')

        with caplog.at_level(logging.CRITICAL, logger="ledger.bootstrap"):
            with pytest.raises(SystemExit) as exc_info:
                bootstrap(options)

        assert exc_info.value.code == 1
        assert "Failed to connect to Fabric" in caplog.text

    def test_misshaped_connection_profile_is_fatal(self, ledger_app, options, tmp_path, caplog):
        (tmp_path / "profile.yaml").write_text("client:\n  gateway: http://gw\n")

        with caplog.at_level(logging.CRITICAL, logger="ledger.bootstrap"):
            with pytest.raises(SystemExit):
                bootstrap({**options, "GATEWAY_CLASS": "ledger.gateway.RestGateway"})

        assert "malformed client.gateway block" in caplog.text


class TestGenerateConnectionProfileCommand:
    def test_writes_to_output(self, tmp_path, settings):
        settings.LEDGER = {**settings.LEDGER, "TLS_CERT_PATH": ""}
        target = tmp_path / "generated.yaml"

        call_command("generate_connection_profile", output=str(target))

        assert read_connection_profile(target)["client"]["organization"]

    def test_failure_is_a_command_error(self, tmp_path, settings):
        settings.LEDGER = {**settings.LEDGER, "TLS_CERT_PATH": str(tmp_path / "absent.pem")}

        with pytest.raises(CommandError, match="failed to generate connection profile"):
            call_command("generate_connection_profile", output=str(tmp_path / "x.yaml"))
