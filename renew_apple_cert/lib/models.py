"""Input and result models for credential provisioning."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CredentialRequestInput:
    """Identity fields carried by the certificate signing request.

    Values are used verbatim: no character set or email syntax checks.
    """

    common_name: str
    country: str
    province: str
    locality: str
    organization: str
    email: str


@dataclass
class CredentialResult:
    """Result from credential creation.

    Contains the paths of the persisted key and request, plus the SHA-256
    fingerprint of the public key they share.
    """

    key_path: Path
    csr_path: Path
    public_key_fingerprint: str
