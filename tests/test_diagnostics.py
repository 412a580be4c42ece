"""Tests for environment requirement checks."""

import dataclasses

import pytest

from sibilant.diagnostics import check_requirements
from sibilant.diagnostics import requirements
from sibilant.translation.config import UnknownProviderConfig


@pytest.fixture
def everything_installed(monkeypatch):
    monkeypatch.setattr(requirements.shutil, "which", lambda name: f"/usr/bin/{name}")


def _ids(issues):
    return [issue.id for issue in issues]


def test_clean_configuration(make_settings, everything_installed):
    assert check_requirements(make_settings("open-ai"), system="Darwin") == []


def test_undefined_provider(make_settings, everything_installed):
    assert _ids(check_requirements(make_settings("deepl"), system="Darwin")) == ["provider"]


def test_unknown_provider_type(make_settings, everything_installed):
    settings = make_settings("deepl")
    providers = dict(settings.providers, deepl=UnknownProviderConfig(kind="deepl-api", title="DeepL"))
    settings = dataclasses.replace(settings, providers=providers)

    assert _ids(check_requirements(settings, system="Darwin")) == ["provider_type"]


def test_bad_service_url(make_settings, everything_installed):
    settings = make_settings("libre")
    providers = dict(settings.providers)
    providers["libre"] = dataclasses.replace(providers["libre"], base_url="localhost:5000")
    settings = dataclasses.replace(settings, providers=providers)

    assert _ids(check_requirements(settings, system="Darwin")) == ["base_url"]


def test_command_not_on_path(make_settings, monkeypatch):
    monkeypatch.setattr(requirements.shutil, "which", lambda name: None)

    issues = check_requirements(make_settings("local-translate"), system="Linux")

    assert _ids(issues) == ["clipboard", "command"]
    assert all(issue.severity == "error" for issue in issues)


def test_command_without_text_placeholder(make_settings, everything_installed):
    settings = make_settings("local-translate")
    providers = dict(settings.providers)
    providers["local-translate"] = dataclasses.replace(providers["local-translate"], args=("--brief",))
    settings = dataclasses.replace(settings, providers=providers)

    issues = check_requirements(settings, system="Darwin")

    assert _ids(issues) == ["command_args"]
    assert issues[0].severity == "warning"


def test_real_interpreter_is_found(make_settings):
    assert check_requirements(make_settings("local-translate"), system="Darwin") == []


def test_cloud_provider_without_key(make_settings, everything_installed):
    settings = make_settings("open-ai")
    providers = dict(settings.providers)
    providers["open-ai"] = dataclasses.replace(providers["open-ai"], api_key=None)
    settings = dataclasses.replace(settings, providers=providers)

    assert _ids(check_requirements(settings, system="Darwin")) == ["api_key"]
