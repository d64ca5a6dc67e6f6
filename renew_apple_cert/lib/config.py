"""Configuration dataclasses and settings loading."""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from cryptography.hazmat.primitives import hashes
from dotenv import dotenv_values

from .errors import ConfigurationError
from .models import CredentialRequestInput

SUPPORTED_KEY_SIZES = (2048,)
SUPPORTED_PUBLIC_EXPONENTS = (65537,)
SUPPORTED_SIGNATURE_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "sha256": hashes.SHA256,
}

ENVIRONMENT_VARIABLE = "ENV_PUSH_PROXY"
ENV_FILES = {
    "production": Path(".env"),
    "development": Path(".env.example"),
}
DEFAULT_ENV_FILE = Path("testdata/.env.testdata")

SETTINGS_KEYS = (
    "APP",
    "APPLE_PUSH_TOPIC",
    "COUNTRY",
    "PROVINCE",
    "LOCALITY",
    "ORGANIZATION",
    "EMAIL",
    "DIR_CSR",
    "DIR_DOWNLOADED",
)


@dataclass(frozen=True)
class CredentialConfig:
    """Algorithm parameters for key generation, signing and file output."""

    key_size: int = 2048
    public_exponent: int = 65537
    signature_hash: str = "sha256"
    file_mode: int = 0o700

    def __post_init__(self) -> None:
        if self.key_size not in SUPPORTED_KEY_SIZES:
            raise ConfigurationError(
                f"unsupported RSA key size {self.key_size}, expected one of {SUPPORTED_KEY_SIZES}"
            )
        if self.public_exponent not in SUPPORTED_PUBLIC_EXPONENTS:
            raise ConfigurationError(f"unsupported RSA public exponent {self.public_exponent}")
        if self.signature_hash not in SUPPORTED_SIGNATURE_HASHES:
            raise ConfigurationError(f"unsupported signature hash {self.signature_hash!r}")

    def hash_algorithm(self) -> hashes.HashAlgorithm:
        """Return a fresh hash instance for signing."""
        return SUPPORTED_SIGNATURE_HASHES[self.signature_hash]()


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one run."""

    app: str
    apple_push_topic: str
    country: str
    province: str
    locality: str
    organization: str
    email: str
    dir_csr: Path
    dir_downloaded: Path | None = None
    environment: str = ""

    def to_request_input(self) -> CredentialRequestInput:
        """Build the identity fields for the signing request."""
        return CredentialRequestInput(
            common_name=self.apple_push_topic,
            country=self.country,
            province=self.province,
            locality=self.locality,
            organization=self.organization,
            email=self.email,
        )

    def directories(self) -> list[Path]:
        """Directories that must exist before anything is written."""
        dirs = [self.dir_csr]
        if self.dir_downloaded is not None:
            dirs.append(self.dir_downloaded)
        return dirs


def resolve_env_file(environment: str) -> Path:
    """Map an environment name to its dotenv file."""
    return ENV_FILES.get(environment, DEFAULT_ENV_FILE)


def load_settings(
    environment: str | None = None,
    env_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load run settings from a dotenv file overlaid with the process environment.

    Variables already present in the environment win over the file, the
    same way a dotenv loader that does not override existing variables
    behaves.

    Args:
        environment: Environment name; defaults to $ENV_PUSH_PROXY
        env_file: Explicit dotenv path, bypassing the environment mapping
        environ: Environment mapping; defaults to os.environ

    Returns:
        Resolved Settings

    Raises:
        ConfigurationError: If the dotenv file is missing or APP/DIR_CSR are unset
    """
    environ = os.environ if environ is None else environ
    if environment is None:
        environment = environ.get(ENVIRONMENT_VARIABLE, "")
    path = env_file if env_file is not None else resolve_env_file(environment)

    if not path.is_file():
        raise ConfigurationError(f"settings file not found: {path}")

    values = {key: value or "" for key, value in dotenv_values(path).items()}
    for key in SETTINGS_KEYS:
        if key in environ:
            values[key] = environ[key]

    missing = [key for key in ("APP", "DIR_CSR") if not values.get(key)]
    if missing:
        raise ConfigurationError(f"missing required settings in {path}: {', '.join(missing)}")

    dir_downloaded = values.get("DIR_DOWNLOADED")

    return Settings(
        app=values["APP"],
        apple_push_topic=values.get("APPLE_PUSH_TOPIC", ""),
        country=values.get("COUNTRY", ""),
        province=values.get("PROVINCE", ""),
        locality=values.get("LOCALITY", ""),
        organization=values.get("ORGANIZATION", ""),
        email=values.get("EMAIL", ""),
        dir_csr=Path(values["DIR_CSR"]),
        dir_downloaded=Path(dir_downloaded) if dir_downloaded else None,
        environment=environment,
    )
