"""
Cryptographic utilities.

Hashing and randomness use PyNaCl; secp256k1 keys, ECDH and AES-CBC use
`cryptography`, since libsodium has no secp256k1 support.
"""
import nacl.encoding
import nacl.hash
import nacl.utils
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from typing import Tuple

from .errors import InvalidInputError


CURVE = ec.SECP256K1()
KEY_SIZE = 32
IV_SIZE = 16


def sha256_hex(data: bytes) -> str:
    """SHA-256 digest of data as lowercase hex."""
    return nacl.hash.sha256(data, encoder=nacl.encoding.HexEncoder).decode('ascii')


def random_bytes(size: int) -> bytes:
    """Cryptographically secure random bytes."""
    return nacl.utils.random(size)


def parse_key_hex(value: str, name: str = "key") -> bytes:
    """
    Decode a 32-byte key given as 64 hex characters.

    Raises InvalidInputError without echoing the value, since it may be a
    private key.
    """
    if not isinstance(value, str) or len(value) != KEY_SIZE * 2:
        raise InvalidInputError(f"{name} must be {KEY_SIZE * 2} hex characters")
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise InvalidInputError(f"{name} must be {KEY_SIZE * 2} hex characters") from None


def _private_key(privkey_hex: str) -> ec.EllipticCurvePrivateKey:
    secret = int.from_bytes(parse_key_hex(privkey_hex, "private key"), 'big')
    return ec.derive_private_key(secret, CURVE)


def _public_key(pubkey_hex: str) -> ec.EllipticCurvePublicKey:
    # Nostr pubkeys are x-only; ECDH output is the same for either y parity.
    x_only = parse_key_hex(pubkey_hex, "public key")
    return ec.EllipticCurvePublicKey.from_encoded_point(CURVE, b'\x02' + x_only)


def _x_only(public_key: ec.EllipticCurvePublicKey) -> str:
    return public_key.public_numbers().x.to_bytes(KEY_SIZE, 'big').hex()


def generate_keypair() -> Tuple[str, str]:
    """Generate a secp256k1 keypair. Returns (private_key_hex, public_key_hex)."""
    private_key = ec.generate_private_key(CURVE)
    secret = private_key.private_numbers().private_value.to_bytes(KEY_SIZE, 'big')
    return secret.hex(), _x_only(private_key.public_key())


def get_public_key(privkey_hex: str) -> str:
    """Derive the x-only public key (hex) for a private key (hex)."""
    return _x_only(_private_key(privkey_hex).public_key())


def shared_secret(pubkey_hex: str, privkey_hex: str) -> bytes:
    """
    ECDH over secp256k1.

    Returns the 32-byte x coordinate of the shared point, unhashed, which is
    the NIP-04 shared key. Raises ValueError if the point is not on the curve
    or the scalar is out of range.
    """
    private_key = _private_key(privkey_hex)
    return private_key.exchange(ec.ECDH(), _public_key(pubkey_hex))


def aes_cbc_encrypt(plaintext: bytes, key: bytes, iv: bytes) -> bytes:
    """Encrypt with AES-256-CBC and PKCS7 padding."""
    padder = padding.PKCS7(algorithms.AES.block_size).padder()
    padded = padder.update(plaintext) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    return encryptor.update(padded) + encryptor.finalize()


def aes_cbc_decrypt(ciphertext: bytes, key: bytes, iv: bytes) -> bytes:
    """Decrypt AES-256-CBC and strip PKCS7 padding. Raises ValueError on bad padding."""
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ciphertext) + decryptor.finalize()
    unpadder = padding.PKCS7(algorithms.AES.block_size).unpadder()
    return unpadder.update(padded) + unpadder.finalize()


class Secp256k1Signer:
    """Default Signer capability backed by secp256k1 keys."""

    def get_public_key(self, privkey: str) -> str:
        return get_public_key(privkey)

    def generate_ephemeral(self) -> Tuple[str, str]:
        return generate_keypair()
