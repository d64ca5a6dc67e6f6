"""Test fixtures for renew_apple_cert tests."""

from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

from renew_apple_cert.lib.cert_utils import generate_private_key
from renew_apple_cert.lib.config import CredentialConfig, Settings
from renew_apple_cert.lib.csr_builder import CSRBuilder
from renew_apple_cert.lib.models import CredentialRequestInput


@pytest.fixture
def temp_output_dir(tmp_path: Path) -> Path:
    """Return temporary directory for test output artifacts."""
    return tmp_path


@pytest.fixture
def credential_config() -> CredentialConfig:
    """Return default credential configuration (RSA-2048, SHA-256)."""
    return CredentialConfig()


@pytest.fixture(scope="session")
def private_key() -> RSAPrivateKey:
    """Generate one RSA key shared by tests that only need to sign."""
    return generate_private_key()


@pytest.fixture
def request_input() -> CredentialRequestInput:
    """Return the push service identity used throughout the tests."""
    return CredentialRequestInput(
        common_name="com.example.app",
        country="US",
        province="CA",
        locality="SF",
        organization="Example",
        email="ops@example.com",
    )


@pytest.fixture
def signing_request(
    request_input: CredentialRequestInput,
    private_key: RSAPrivateKey,
) -> x509.CertificateSigningRequest:
    """Build a signed request for the push service identity."""
    return CSRBuilder.build_signing_request(request_input, private_key)


@pytest.fixture
def settings(temp_output_dir: Path) -> Settings:
    """Return resolved settings writing under the temporary directory."""
    return Settings(
        app="pushservice",
        apple_push_topic="com.example.app",
        country="US",
        province="CA",
        locality="SF",
        organization="Example",
        email="ops@example.com",
        dir_csr=temp_output_dir / "csr",
        dir_downloaded=temp_output_dir / "downloaded",
        environment="test",
    )


@pytest.fixture
def env_file(temp_output_dir: Path) -> Path:
    """Write a dotenv settings file and return its path."""
    path = temp_output_dir / ".env.testdata"
    path.write_text(
        "\n".join(
            [
                "APP=pushservice",
                "APPLE_PUSH_TOPIC=com.example.app",
                "COUNTRY=US",
                "PROVINCE=CA",
                "LOCALITY=SF",
                "ORGANIZATION=Example",
                "EMAIL=ops@example.com",
                f"DIR_CSR={temp_output_dir / 'csr'}",
                f"DIR_DOWNLOADED={temp_output_dir / 'downloaded'}",
            ]
        )
        + "\n"
    )
    return path
