"""Key generation, PEM serialization and signing request verification helpers."""

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from .config import CredentialConfig
from .errors import EncodingError, GenerationError


def generate_private_key(config: CredentialConfig | None = None) -> RSAPrivateKey:
    """Generate a fresh RSA private key from the OS random source.

    Raises:
        GenerationError: If generation fails or yields the wrong key size
    """
    config = config or CredentialConfig()
    try:
        key = rsa.generate_private_key(
            public_exponent=config.public_exponent,
            key_size=config.key_size,
        )
    except Exception as err:
        raise GenerationError(f"RSA-{config.key_size} key generation failed: {err}") from err

    if key.key_size != config.key_size:
        raise GenerationError(f"expected {config.key_size}-bit key, got {key.key_size} bits")
    return key


def serialize_private_key(key: RSAPrivateKey) -> bytes:
    """Serialize private key to PEM format (PKCS1 "RSA PRIVATE KEY", no encryption)."""
    try:
        return key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.TraditionalOpenSSL,
            encryption_algorithm=serialization.NoEncryption(),
        )
    except (ValueError, TypeError) as err:
        raise EncodingError(f"cannot encode private key: {err}") from err


def deserialize_private_key(pem_data: bytes) -> RSAPrivateKey:
    """Deserialize private key from PEM bytes."""
    key = serialization.load_pem_private_key(pem_data, password=None)
    if not isinstance(key, RSAPrivateKey):
        raise ValueError("expected RSA private key")
    return key


def serialize_csr(csr: x509.CertificateSigningRequest) -> bytes:
    """Serialize CSR to PEM format."""
    try:
        return csr.public_bytes(serialization.Encoding.PEM)
    except (ValueError, TypeError) as err:
        raise EncodingError(f"cannot encode signing request: {err}") from err


def deserialize_csr(pem_data: bytes) -> x509.CertificateSigningRequest:
    """Deserialize CSR from PEM bytes."""
    return x509.load_pem_x509_csr(pem_data)


def extract_csr_public_key(
    csr: x509.CertificateSigningRequest,
) -> RSAPublicKey:
    """Extract public key from CSR.

    Raises:
        ValueError: If public key is not RSA type
    """
    public_key = csr.public_key()
    if not isinstance(public_key, RSAPublicKey):
        raise ValueError("CSR public key must be RSA type")
    return public_key


def validate_csr_signature(csr: x509.CertificateSigningRequest) -> bool:
    """Verify CSR self-signature to prove private key possession.

    Returns:
        True if signature is valid, False otherwise
    """
    try:
        return csr.is_signature_valid
    except Exception:
        return False


def request_matches_key(csr: x509.CertificateSigningRequest, key: RSAPrivateKey) -> bool:
    """Return True if the CSR is validly signed and carries the public half of key."""
    if not validate_csr_signature(csr):
        return False
    try:
        csr_public_key = extract_csr_public_key(csr)
    except ValueError:
        return False
    return csr_public_key.public_numbers() == key.public_key().public_numbers()


def public_key_fingerprint(public_key: RSAPublicKey) -> str:
    """Return the hex SHA-256 digest of the DER SubjectPublicKeyInfo."""
    der = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    digest = hashes.Hash(hashes.SHA256())
    digest.update(der)
    return digest.finalize().hex()
