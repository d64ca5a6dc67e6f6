#!/usr/bin/env python3
"""Create the private key and CSR needed to renew an Apple push certificate."""

import argparse
import dataclasses
import sys
from pathlib import Path

from renew_apple_cert.lib.config import ENVIRONMENT_VARIABLE, CredentialConfig, Settings, load_settings
from renew_apple_cert.lib.credential_manager import CredentialManager
from renew_apple_cert.lib.errors import CredentialError
from renew_apple_cert.lib.fs_utils import ensure_directories
from renew_apple_cert.lib.logging_config import LOGGER
from renew_apple_cert.lib.models import CredentialResult


def create_credentials(
    settings: Settings,
    config: CredentialConfig | None = None,
) -> CredentialResult:
    """Provision output directories, then create and persist the key and CSR.

    Args:
        settings: Resolved run settings
        config: Algorithm parameters (defaults to RSA-2048, SHA-256)

    Returns:
        CredentialResult with file paths and public key fingerprint

    Raises:
        CredentialError: Subclass naming the stage that failed
    """
    manager = CredentialManager(config)
    ensure_directories(settings.directories(), manager.config.file_mode)
    return manager.create_credentials(
        app=settings.app,
        request=settings.to_request_input(),
        output_dir=settings.dir_csr,
    )


def main(argv: list[str] | None = None) -> int:
    """Run credential creation from the command line.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    parser = argparse.ArgumentParser(
        description="Generate a private key and CSR for Apple push certificate renewal"
    )
    parser.add_argument(
        "--environment",
        default=None,
        help=f"Settings environment: production, development or test (default: ${ENVIRONMENT_VARIABLE})",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Explicit dotenv settings file, overriding the environment mapping",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the .key and .csr files (default: DIR_CSR setting)",
    )
    args = parser.parse_args(argv)

    app = ""
    try:
        settings = load_settings(environment=args.environment, env_file=args.env_file)
        if args.output_dir is not None:
            settings = dataclasses.replace(settings, dir_csr=args.output_dir)
        app = settings.app

        LOGGER.info("Using environment %r", settings.environment)
        result = create_credentials(settings)

        LOGGER.info("Credentials created:")
        LOGGER.info("  Key: %s", result.key_path)
        LOGGER.info("  CSR: %s", result.csr_path)
        LOGGER.info("  Public key SHA-256: %s", result.public_key_fingerprint)
        LOGGER.info("Next: submit %s to the certificate authority", result.csr_path)
        return 0

    except CredentialError as e:
        LOGGER.error(
            "Credential creation failed at %s stage: %s",
            e.stage,
            e,
            extra={"stage": e.stage, "app": app},
        )
        return 1
    except Exception as e:
        LOGGER.error("Credential creation failed: %s", e, extra={"app": app})
        return 1


if __name__ == "__main__":
    sys.exit(main())
