import hashlib
import base64
import logging
from typing import Protocol

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import (
    Encoding, PublicFormat, load_pem_public_key
)

from .models import SigningPayload, Transaction

logger = logging.getLogger(__name__)

def sha256_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()

def compute_spend_hash(spend_index: int, tx: Transaction) -> str:
    """
    Computes the message a co-signer signs for one spend.

    Signatures are stripped from every spend of a deep copy before encoding,
    so the digest covers the unsigned skeleton of the whole transaction plus
    the spend index, and never changes as signatures are collected.
    """
    unsigned = tx.model_copy(deep=True)
    for spend in unsigned.spends:
        spend.seeds.signatures.clear()

    payload = SigningPayload(spend_index=spend_index, transaction=unsigned)
    digest = sha256_hash(payload.model_dump_json().encode('utf-8'))
    logger.debug("Computed signing hash %s for spend %d", digest, spend_index)
    return digest

# --- Signature verification ---
# The core treats signatures as opaque. Verification only happens when a
# caller injects a verifier into add_signature.

class SignatureVerifier(Protocol):
    def verify(self, pubkey: str, signature: str, message: bytes) -> bool:
        ...

def generate_private_key():
    return ec.generate_private_key(ec.SECP256K1())

def sign_message(private_key, message: bytes) -> bytes:
    return private_key.sign(message, ec.ECDSA(hashes.SHA256()))

def serialize_public_key(public_key) -> str:
    pem = public_key.public_bytes(encoding=Encoding.PEM, format=PublicFormat.SubjectPublicKeyInfo)
    return base64.b64encode(pem).decode('utf-8')

def sign_spend_hash(private_key, message_hash: str) -> str:
    """Signs a spend's message hash and returns the base64 DER signature."""
    signature = sign_message(private_key, message_hash.encode('utf-8'))
    return base64.b64encode(signature).decode('utf-8')

class EcdsaVerifier:
    """
    Verifies base64 DER ECDSA-SHA256 signatures against base64 PEM public keys,
    the encodings produced by serialize_public_key and sign_spend_hash.
    """

    def verify(self, pubkey: str, signature: str, message: bytes) -> bool:
        try:
            public_key = load_pem_public_key(base64.b64decode(pubkey))
            if not isinstance(public_key, ec.EllipticCurvePublicKey):
                return False
            public_key.verify(base64.b64decode(signature), message, ec.ECDSA(hashes.SHA256()))
            return True
        except (InvalidSignature, UnsupportedAlgorithm, ValueError):
            return False
