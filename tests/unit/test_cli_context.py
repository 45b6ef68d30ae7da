"""Unit tests for the environment-driven Settings builder."""

import logging

import pytest

from fieldseal.cli.context import Settings, build_settings
from fieldseal.core.models import LEGACY_SCHEME, MarkerScheme


def test_defaults_from_empty_environment():
    settings = build_settings({})

    assert settings == Settings()
    assert settings.scheme == MarkerScheme()
    assert settings.log_level == logging.WARNING


def test_values_from_environment():
    settings = build_settings(
        {
            "FIELDSEAL_MARKER_ATTRIBUTE": "protect",
            "FIELDSEAL_MARKER_SCHEME": "Legacy",
            "FIELDSEAL_STRICT": "yes",
            "FIELDSEAL_WORKERS": "4",
            "FIELDSEAL_LOG_LEVEL": "debug",
            "FIELDSEAL_KEYRING_SERVICE": "svc",
            "FIELDSEAL_KEYRING_ACCOUNT": "acct",
            "CONFIG_MASTER_KEY_FILE": "/run/secrets/master",
        }
    )

    assert settings.scheme == LEGACY_SCHEME.with_attribute("protect")
    assert settings.strict is True
    assert settings.workers == 4
    assert settings.log_level == logging.DEBUG
    assert (settings.keyring_service, settings.keyring_account) == ("svc", "acct")
    assert settings.key_file == "/run/secrets/master"


@pytest.mark.parametrize("raw", ["0", "false", "", "nope"])
def test_strict_false_values(raw):
    assert build_settings({"FIELDSEAL_STRICT": raw}).strict is False


def test_blank_attribute_keeps_default():
    assert build_settings({"FIELDSEAL_MARKER_ATTRIBUTE": "  "}).marker_attribute == "mode"


@pytest.mark.parametrize(
    "env",
    [
        {"FIELDSEAL_MARKER_SCHEME": "fancy"},
        {"FIELDSEAL_WORKERS": "many"},
        {"FIELDSEAL_LOG_LEVEL": "LOUD"},
    ],
)
def test_invalid_values_raise(env):
    with pytest.raises(ValueError):
        build_settings(env)
