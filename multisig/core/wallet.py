import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from . import crypto
from .errors import EncodingError, IndexOutOfBounds, InvalidSignature, UnauthorizedSigner
from .models import Note, Output, Seeds, SigningStatus, Spend, Transaction

logger = logging.getLogger(__name__)

READY_FOR_BROADCAST = "Transaction is valid and ready for broadcast"

_notes_adapter = TypeAdapter(List[Note])
_outputs_adapter = TypeAdapter(List[Output])

def _decode(adapter, data: str, what: str):
    try:
        return adapter.validate_json(data)
    except ValidationError as e:
        raise EncodingError(f"Malformed {what}: {e}") from e

def import_transaction(tx_json: str) -> Transaction:
    """Parses a transaction shared by another co-signer (compact or pretty JSON)."""
    try:
        return Transaction.model_validate_json(tx_json)
    except ValidationError as e:
        raise EncodingError(f"Malformed transaction: {e}") from e

def export_transaction(tx_json: str) -> str:
    tx = import_transaction(tx_json)
    return json.dumps(tx.model_dump(mode='json'), indent=2)

def _get_spend(tx: Transaction, spend_index: int) -> Spend:
    # Negative indices must not wrap around to the end of the list.
    if spend_index < 0 or spend_index >= len(tx.spends):
        raise IndexOutOfBounds(
            f"Spend index {spend_index} out of bounds (transaction has {len(tx.spends)} spends)"
        )
    return tx.spends[spend_index]

def spend_hash(tx: Transaction, spend_index: int) -> str:
    return _get_spend(tx, spend_index).seeds.message_hash

def signing_status(spend_index: int, tx: Transaction) -> SigningStatus:
    """
    Splits the spend's permitted keys into signed and pending, keeping the
    lock's key order. Never modifies the transaction.
    """
    spend = _get_spend(tx, spend_index)
    pkh = spend.note.lock.pkh

    signed = [pk for pk in pkh.pubkeys if spend.seeds.has_signature(pk)]
    pending = [pk for pk in pkh.pubkeys if not spend.seeds.has_signature(pk)]

    return SigningStatus(
        spend_index=spend_index,
        threshold=pkh.threshold,
        signed=signed,
        pending=pending,
        complete=len(signed) >= pkh.threshold,
    )

def create_transaction(notes: List[Note], outputs: List[Output]) -> Transaction:
    spends = []
    for i, note in enumerate(notes):
        note.lock.pkh.validate_condition()

        # Hashed against the outputs alone, before any spend is attached.
        skeleton = Transaction(spends=[], outputs=outputs)
        message_hash = crypto.compute_spend_hash(i, skeleton)

        spends.append(Spend(note=note, seeds=Seeds(message_hash=message_hash)))

    tx = Transaction(spends=spends, outputs=outputs)
    tx.validate_balance()

    logger.info(
        "Built transaction with %d spends and %d outputs (total value %d)",
        len(tx.spends), len(tx.outputs), tx.total_input(),
    )
    return tx

def submit_signature(
    tx: Transaction,
    spend_index: int,
    pubkey: str,
    signature: str,
    verifier: Optional[crypto.SignatureVerifier] = None,
) -> Transaction:
    spend = _get_spend(tx, spend_index)

    if pubkey not in spend.note.lock.pkh.pubkeys:
        logger.warning("Rejected signature from unauthorized key %s on spend %d", pubkey, spend_index)
        raise UnauthorizedSigner(f"Public key not allowed for spend {spend_index}")

    if verifier is not None and not verifier.verify(
        pubkey, signature, spend.seeds.message_hash.encode('utf-8')
    ):
        logger.warning("Rejected invalid signature from %s on spend %d", pubkey, spend_index)
        raise InvalidSignature(f"Signature does not verify for spend {spend_index}")

    spend.seeds.add_signature(pubkey, signature)
    logger.info(
        "Accepted signature on spend %d (%d of %d)",
        spend_index, spend.seeds.signature_count(), spend.note.lock.pkh.threshold,
    )
    return tx

def check_transaction(tx: Transaction) -> str:
    tx.validate_balance()
    tx.validate_signatures()
    logger.info("Transaction with %d spends is ready for broadcast", len(tx.spends))
    return READY_FOR_BROADCAST

# --- JSON boundary ---
# Each operation receives a full snapshot and returns a full snapshot.

def build_transaction(notes_json: str, outputs_json: str) -> str:
    notes = _decode(_notes_adapter, notes_json, "notes")
    outputs = _decode(_outputs_adapter, outputs_json, "outputs")
    return create_transaction(notes, outputs).model_dump_json()

def get_spend_hash(tx_json: str, spend_index: int) -> str:
    return spend_hash(import_transaction(tx_json), spend_index)

def add_signature(
    tx_json: str,
    spend_index: int,
    pubkey: str,
    signature: str,
    verifier: Optional[crypto.SignatureVerifier] = None,
) -> str:
    tx = import_transaction(tx_json)
    return submit_signature(tx, spend_index, pubkey, signature, verifier).model_dump_json()

def get_spend_signing_status(tx_json: str, spend_index: int) -> str:
    tx = import_transaction(tx_json)
    return signing_status(spend_index, tx).model_dump_json()

def validate_transaction(tx_json: str) -> str:
    return check_transaction(import_transaction(tx_json))
