"""TLS version and hostname verification option tests."""

from __future__ import annotations

import pytest

from VfsKit.FileOptions import InvalidFormatError, InvalidValueError, MissingInputError
from VfsKit.HttpOptions import HttpHostnameVerification, HttpTlsVersions, TlsVersion

CLOSURE = "must be either [V_1_0, V_1_1, V_1_2, V_1_3]."


def test_versions_are_joined_for_output_and_apply(context):
    option = HttpTlsVersions.from_json(["V_1_1", "V_1_2", "V_1_3"])

    assert option.get_value() == "V_1_1,V_1_2,V_1_3"
    assert option.values == (TlsVersion.V_1_1, TlsVersion.V_1_2, TlsVersion.V_1_3)
    option.apply(context)
    assert context.get_tls_versions() == "V_1_1,V_1_2,V_1_3"


def test_native_construction_accepts_members_and_names():
    assert HttpTlsVersions((TlsVersion.V_1_3,)) == HttpTlsVersions(("V_1_3",))
    assert str(HttpTlsVersions(("V_1_2",))) == '{"http:tlsVersions":"V_1_2"}'


def test_unknown_version_lists_legal_members():
    with pytest.raises(InvalidValueError) as excinfo:
        HttpTlsVersions.from_json(["V_1_2", "BOGUS"])

    assert str(excinfo.value) == f"FileOption value of [http:tlsVersions] {CLOSURE}"


@pytest.mark.parametrize("payload", ["V_1_2", {"V_1_2": True}, ["V_1_2", None]])
def test_shape_rejections(payload):
    with pytest.raises(InvalidFormatError) as excinfo:
        HttpTlsVersions.from_json(payload)

    assert str(excinfo.value).endswith(CLOSURE)


def test_null_is_missing():
    with pytest.raises(MissingInputError):
        HttpTlsVersions.from_json(None)


def test_hostname_verification(context):
    option = HttpHostnameVerification.from_json(False)

    option.apply(context)
    assert context.get_hostname_verification() is False
    assert option.get_value() is False
    with pytest.raises(InvalidFormatError, match="must be boolean."):
        HttpHostnameVerification.from_json("false")


def test_empty_version_list_applies_and_keeps_ssl_defaults(context):
    option = HttpTlsVersions.from_json([])

    option.apply(context)

    assert option.get_value() == ""
    assert context.get_tls_versions() == ""
    assert "verify" not in context.to_httpx_kwargs()
