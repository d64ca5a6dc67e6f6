"""Error taxonomy for credential provisioning.

Every error carries the name of the stage that failed so the entry point
can report it without inspecting the exception type.
"""


class CredentialError(Exception):
    """Base class for all credential provisioning failures."""

    stage = "credentials"


class ConfigurationError(CredentialError):
    """Settings could not be resolved or hold unsupported values."""

    stage = "configuration"


class ProvisioningError(CredentialError):
    """Output directory cannot be created or is not a directory."""

    stage = "provisioning"


class GenerationError(CredentialError):
    """Key pair generation failed."""

    stage = "generation"


class EncodingError(CredentialError):
    """DER/PEM encoding failed, including non-ASCII data in IA5String fields."""

    stage = "encoding"


class PersistenceError(CredentialError):
    """Writing an artifact to the filesystem failed."""

    stage = "persistence"


class SigningError(CredentialError):
    """Signing the request failed or the signature does not verify."""

    stage = "signing"
