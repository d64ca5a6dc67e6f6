"""Certificate signing request construction for push certificate renewal."""

import string

from cryptography import x509
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey

# Private, but the only way to pick the string type of a name attribute
from cryptography.x509.name import _ASN1Type
from cryptography.x509.oid import NameOID

from .config import CredentialConfig
from .errors import EncodingError, SigningError
from .models import CredentialRequestInput

PRINTABLE_STRING_CHARS = frozenset(string.ascii_letters + string.digits + " '()+,-./:=?")


def string_type_for(value: str) -> _ASN1Type:
    """Return PrintableString when value fits its alphabet, UTF8String otherwise."""
    if isinstance(value, str) and all(char in PRINTABLE_STRING_CHARS for char in value):
        return _ASN1Type.PrintableString
    return _ASN1Type.UTF8String


class CSRBuilder:
    """Builds PKCS#10 signing requests from credential request input."""

    @staticmethod
    def build_subject(request: CredentialRequestInput) -> x509.Name:
        """Build the subject DN with the email carried as a legacy PKCS#9 attribute.

        Each field becomes its own single-valued RDN, in the order C, ST, L,
        O, CN, emailAddress. The email is an IA5String emailAddress
        (1.2.840.113549.1.9.1) attribute on the subject rather than a
        subjectAltName extension, for authorities that still expect the
        legacy form.

        Values are passed through verbatim: empty strings stay present as
        empty attributes and country codes are not length checked. The
        country is a PrintableString when its characters allow it and a
        UTF8String otherwise.

        The name is DER-encoded once here so encoding problems surface
        before signing.

        Args:
            request: Identity fields for the subject

        Returns:
            X.509 Name ready for the request builder

        Raises:
            EncodingError: If the email is not ASCII or a value cannot be encoded
        """
        try:
            request.email.encode("ascii")
        except UnicodeEncodeError as err:
            raise EncodingError(
                f"email address {request.email!r} is not valid IA5String (ASCII) text"
            ) from err

        try:
            subject = x509.Name(
                [
                    x509.NameAttribute(
                        NameOID.COUNTRY_NAME,
                        request.country,
                        string_type_for(request.country),
                        _validate=False,
                    ),
                    x509.NameAttribute(
                        NameOID.STATE_OR_PROVINCE_NAME, request.province, _validate=False
                    ),
                    x509.NameAttribute(NameOID.LOCALITY_NAME, request.locality, _validate=False),
                    x509.NameAttribute(
                        NameOID.ORGANIZATION_NAME, request.organization, _validate=False
                    ),
                    x509.NameAttribute(NameOID.COMMON_NAME, request.common_name, _validate=False),
                    x509.NameAttribute(
                        NameOID.EMAIL_ADDRESS,
                        request.email,
                        _ASN1Type.IA5String,
                        _validate=False,
                    ),
                ]
            )
            subject.public_bytes()
        except (TypeError, ValueError) as err:
            raise EncodingError(f"cannot encode subject name: {err}") from err
        return subject

    @staticmethod
    def build_signing_request(
        request: CredentialRequestInput,
        private_key: RSAPrivateKey,
        config: CredentialConfig | None = None,
    ) -> x509.CertificateSigningRequest:
        """Build and sign a certificate signing request.

        The signature covers the DER encoding of the subject and public key
        exactly as emitted, so the request must not be re-encoded afterwards.

        Args:
            request: Identity fields for the subject
            private_key: RSA key whose public half goes into the request
            config: Algorithm parameters (SHA-256/RSA by default)

        Returns:
            Signed certificate signing request

        Raises:
            EncodingError: If the subject cannot be encoded
            SigningError: If the key cannot produce the signature
        """
        config = config or CredentialConfig()
        subject = CSRBuilder.build_subject(request)

        try:
            return (
                x509.CertificateSigningRequestBuilder()
                .subject_name(subject)
                .sign(private_key, config.hash_algorithm())
            )
        except (TypeError, ValueError) as err:
            raise SigningError(f"cannot sign request for {request.common_name!r}: {err}") from err
