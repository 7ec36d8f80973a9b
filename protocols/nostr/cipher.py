"""
Pairwise (NIP-04 style) encryption between two identities.

Wire format: base64(iv || ciphertext), AES-256-CBC keyed by the secp256k1 ECDH
shared x coordinate.
"""
import base64
import binascii
import logging

from core import crypto
from core.errors import CryptoOperationError, InvalidInputError

logger = logging.getLogger(__name__)


def encrypt(message: str, recipient_pubkey: str, sender_privkey: str) -> str:
    """
    Encrypt message for recipient_pubkey.

    Raises:
        InvalidInputError: a key is not 64 hex characters
        CryptoOperationError: key derivation or encryption failed
    """
    if not isinstance(message, str):
        raise InvalidInputError("message must be a str")
    crypto.parse_key_hex(recipient_pubkey, "recipient public key")
    crypto.parse_key_hex(sender_privkey, "sender private key")
    try:
        key = crypto.shared_secret(recipient_pubkey, sender_privkey)
        iv = crypto.random_bytes(crypto.IV_SIZE)
        ciphertext = crypto.aes_cbc_encrypt(message.encode('utf-8'), key, iv)
    except (ValueError, TypeError, UnicodeError) as e:
        # The cause may reference key material; keep only its type.
        raise CryptoOperationError(f"Pairwise encryption failed ({type(e).__name__})") from None
    return base64.b64encode(iv + ciphertext).decode('ascii')


def decrypt(ciphertext_b64: str, sender_pubkey: str, recipient_privkey: str) -> str:
    """
    Decrypt a payload produced by encrypt() for this recipient.

    Raises:
        InvalidInputError: a key is not 64 hex characters
        CryptoOperationError: bad encoding, key derivation, padding or UTF-8
    """
    crypto.parse_key_hex(sender_pubkey, "sender public key")
    crypto.parse_key_hex(recipient_privkey, "recipient private key")
    try:
        combined = base64.b64decode(ciphertext_b64, validate=True)
    except (binascii.Error, ValueError, TypeError):
        raise CryptoOperationError("Pairwise decryption failed (invalid base64)") from None
    if len(combined) < crypto.IV_SIZE * 2 or len(combined) % crypto.IV_SIZE:
        raise CryptoOperationError("Pairwise decryption failed (invalid length)")

    iv, ciphertext = combined[:crypto.IV_SIZE], combined[crypto.IV_SIZE:]
    try:
        key = crypto.shared_secret(sender_pubkey, recipient_privkey)
        plaintext = crypto.aes_cbc_decrypt(ciphertext, key, iv)
        return plaintext.decode('utf-8')
    except (ValueError, TypeError, UnicodeError) as e:
        logger.debug("Pairwise decryption failed: %s", type(e).__name__)
        raise CryptoOperationError(f"Pairwise decryption failed ({type(e).__name__})") from None


class PairwiseCipher:
    """Namespace exposing encrypt/decrypt as a stateless value."""
    encrypt = staticmethod(encrypt)
    decrypt = staticmethod(decrypt)
