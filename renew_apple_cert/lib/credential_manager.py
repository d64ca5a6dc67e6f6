"""Credential manager for push certificate renewal requests."""

from pathlib import Path

from .cert_utils import (
    deserialize_csr,
    deserialize_private_key,
    generate_private_key,
    public_key_fingerprint,
    request_matches_key,
    serialize_csr,
    serialize_private_key,
)
from .config import CredentialConfig
from .csr_builder import CSRBuilder
from .errors import ConfigurationError, SigningError
from .fs_utils import remove_file, write_file_atomic
from .logging_config import LOGGER
from .models import CredentialRequestInput, CredentialResult


class CredentialManager:
    """Generates the key and signing request needed to renew a client certificate."""

    def __init__(self, config: CredentialConfig | None = None) -> None:
        """Initialize credential manager with configuration.

        Args:
            config: Algorithm parameters and file mode
        """
        self.config = config or CredentialConfig()

    @staticmethod
    def artifact_paths(app: str, output_dir: Path) -> tuple[Path, Path]:
        """Return the (key, csr) paths for an application identifier.

        Raises:
            ConfigurationError: If app is empty or not a plain file name
        """
        if not app or app in (".", "..") or "/" in app or "\\" in app:
            raise ConfigurationError(f"application identifier {app!r} is not a valid file name")
        return output_dir / f"{app}.key", output_dir / f"{app}.csr"

    def create_credentials(
        self,
        app: str,
        request: CredentialRequestInput,
        output_dir: Path,
    ) -> CredentialResult:
        """Generate a key pair and signed request, writing both to output_dir.

        Stages run in order: generate key, persist key, build and sign the
        request, persist the request. Existing files for the same app are
        replaced with fresh key material.

        Args:
            app: Application identifier, used to name the two files
            request: Identity fields for the request subject
            output_dir: Existing directory for the artifacts

        Returns:
            CredentialResult with file paths and public key fingerprint

        Raises:
            CredentialError: Subclass naming the stage that failed
        """
        key_path, csr_path = self.artifact_paths(app, output_dir)

        LOGGER.info(
            "Generating RSA-%d key for %s",
            self.config.key_size,
            app,
            extra={"stage": "generation", "app": app},
        )
        private_key = generate_private_key(self.config)

        # A CSR from an earlier run must never sit next to the new key
        remove_file(csr_path)
        write_file_atomic(key_path, serialize_private_key(private_key), self.config.file_mode)
        LOGGER.info("Wrote private key to %s", key_path, extra={"stage": "persistence", "app": app})

        csr = CSRBuilder.build_signing_request(request, private_key, self.config)
        if not request_matches_key(csr, private_key):
            raise SigningError(f"signing request for {app} does not verify against its key")

        write_file_atomic(csr_path, serialize_csr(csr), self.config.file_mode)
        LOGGER.info("Wrote signing request to %s", csr_path, extra={"stage": "persistence", "app": app})

        return CredentialResult(
            key_path=key_path,
            csr_path=csr_path,
            public_key_fingerprint=public_key_fingerprint(private_key.public_key()),
        )

    def verify_credentials(self, key_path: Path, csr_path: Path) -> bool:
        """Check that a persisted request is validly signed by the persisted key.

        Returns:
            True if both files parse and belong together, False otherwise
        """
        try:
            private_key = deserialize_private_key(key_path.read_bytes())
            csr = deserialize_csr(csr_path.read_bytes())
        except (OSError, ValueError, TypeError) as err:
            LOGGER.warning("Cannot load credentials for verification: %s", err)
            return False
        return request_matches_key(csr, private_key)
