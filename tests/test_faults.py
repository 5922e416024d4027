"""
Test 1: Fault Taxonomy (faults/)

Tests Fault, FaultDomain, Severity and the message fault families.
"""

import pytest

from plume.faults import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
    MessageArgumentFault,
    MessageRuntimeFault,
    InvalidHeaderName,
    InvalidPort,
    InvalidStream,
    StreamNotReadable,
    UploadError,
    ConfigInvalidFault,
)


# ============================================================================
# Fault base
# ============================================================================

class TestFault:

    def test_explicit_fields(self):
        fault = Fault(code="X", message="boom", domain=FaultDomain.MESSAGE)
        assert fault.code == "X"
        assert fault.message == "boom"
        assert fault.domain == FaultDomain.MESSAGE
        assert str(fault) == "[X] boom"

    def test_missing_required_fields(self):
        with pytest.raises(TypeError, match="missing required"):
            Fault(message="no code")

    def test_domain_defaults_apply(self):
        fault = Fault(code="C", message="m", domain=FaultDomain.CONFIG)
        assert fault.severity == Severity.FATAL
        assert fault.retryable is False

    def test_custom_domain_defaults_to_error(self):
        fault = Fault(code="C", message="m", domain=FaultDomain("custom"))
        assert fault.severity == Severity.ERROR

    def test_to_dict(self):
        fault = Fault(
            code="C", message="m", domain=FaultDomain.URI,
            public=True, metadata={"port": 70000},
        )
        data = fault.to_dict()
        assert data == {
            "code": "C",
            "message": "m",
            "domain": "uri",
            "severity": "error",
            "retryable": False,
            "public": True,
            "metadata": {"port": 70000},
        }

    def test_repr(self):
        fault = Fault(code="C", message="m", domain=FaultDomain.STREAM)
        assert repr(fault) == "Fault(code='C', domain=stream, severity=warn, public=False)"


class TestFaultDomain:

    def test_equality_by_name(self):
        assert FaultDomain("message") == FaultDomain.MESSAGE
        assert FaultDomain.MESSAGE == "message"
        assert hash(FaultDomain("uri")) == hash(FaultDomain.URI)

    def test_every_standard_domain_has_defaults(self):
        for domain in (FaultDomain.CONFIG, FaultDomain.MESSAGE, FaultDomain.URI,
                       FaultDomain.STREAM, FaultDomain.UPLOAD):
            assert domain in DOMAIN_DEFAULTS


# ============================================================================
# Fault families
# ============================================================================

class TestMessageFaults:

    def test_argument_faults_are_value_errors(self):
        fault = InvalidHeaderName(header_name="bad name")
        assert isinstance(fault, MessageArgumentFault)
        assert isinstance(fault, ValueError)
        assert fault.code == "INVALID_HEADER_NAME"
        assert fault.metadata == {"header_name": "bad name"}
        assert fault.public is True

    def test_runtime_faults_are_runtime_errors(self):
        fault = StreamNotReadable()
        assert isinstance(fault, MessageRuntimeFault)
        assert isinstance(fault, RuntimeError)
        assert fault.domain == FaultDomain.STREAM
        assert fault.public is False

    def test_message_override(self):
        fault = InvalidPort("Invalid port: 70000", port=70000)
        assert fault.message == "Invalid port: 70000"
        assert str(fault) == "[INVALID_PORT] Invalid port: 70000"

    def test_default_message(self):
        assert InvalidStream().message == "Invalid stream provided; must be a file-like object"

    def test_class_domain_and_severity(self):
        assert InvalidPort().domain == FaultDomain.URI
        fault = UploadError(error=3)
        assert fault.domain == FaultDomain.UPLOAD
        assert fault.severity == Severity.ERROR

    def test_catchable_as_builtin(self):
        with pytest.raises(ValueError):
            raise InvalidHeaderName()


class TestConfigInvalidFault:

    def test_fields(self):
        fault = ConfigInvalidFault("spool_max_size", "must not be negative")
        assert fault.code == "CONFIG_INVALID"
        assert fault.domain == FaultDomain.CONFIG
        assert fault.metadata["key"] == "spool_max_size"
        assert "spool_max_size" in fault.message
        assert isinstance(fault, ValueError)
