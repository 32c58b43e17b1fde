from pydantic import BaseModel, Field
from typing import List, Tuple

from .errors import (
    BalanceMismatch, DuplicatePublicKey, InsufficientSignatures, InvalidSigner,
    InvalidThreshold, ThresholdExceedsKeys, TransactionError,
)

# Field declaration order is the canonical serialization order used for
# signing hashes. Do not reorder fields.

class PkhCondition(BaseModel):
    threshold: int = Field(..., ge=0, strict=True)
    pubkeys: List[str]

    def validate_condition(self):
        if self.threshold == 0:
            raise InvalidThreshold("Threshold must be >= 1")
        if self.threshold > len(self.pubkeys):
            raise ThresholdExceedsKeys(
                f"Threshold {self.threshold} exceeds number of pubkeys ({len(self.pubkeys)})"
            )

        seen = set()
        for pk in self.pubkeys:
            if pk in seen:
                raise DuplicatePublicKey(f"Duplicate public key in multisig set: {pk}")
            seen.add(pk)

class Lock(BaseModel):
    pkh: PkhCondition

class NoteName(BaseModel):
    first: str
    last: str

class Note(BaseModel):
    name: NoteName
    value: int = Field(..., ge=0, strict=True)
    lock: Lock

class Output(BaseModel):
    recipient: str
    value: int = Field(..., ge=0, strict=True)
    lock: Lock

class Seeds(BaseModel):
    message_hash: str
    signatures: List[Tuple[str, str]] = []

    def add_signature(self, pubkey: str, signature: str):
        # Last submission for a key wins and moves to the end.
        self.signatures = [entry for entry in self.signatures if entry[0] != pubkey]
        self.signatures.append((pubkey, signature))

    def signature_count(self) -> int:
        # Imported transactions may carry repeated keys; count each signer once.
        return len({pk for pk, _ in self.signatures})

    def has_signature(self, pubkey: str) -> bool:
        return any(pk == pubkey for pk, _ in self.signatures)

class Spend(BaseModel):
    note: Note
    seeds: Seeds

class Transaction(BaseModel):
    spends: List[Spend]
    outputs: List[Output]

    def total_input(self) -> int:
        return sum(spend.note.value for spend in self.spends)

    def total_output(self) -> int:
        return sum(output.value for output in self.outputs)

    def validate_balance(self):
        total_input, total_output = self.total_input(), self.total_output()
        if total_input != total_output:
            raise BalanceMismatch(
                f"Input value ({total_input}) does not equal output value ({total_output})"
            )

    def validate_signatures(self):
        """
        Checks every spend in index order and stops at the first failure.
        """
        for i, spend in enumerate(self.spends):
            pkh = spend.note.lock.pkh
            try:
                pkh.validate_condition()
            except TransactionError as e:
                raise e.at_spend(i) from e

            if spend.seeds.signature_count() < pkh.threshold:
                raise InsufficientSignatures(
                    f"has insufficient signatures ({spend.seeds.signature_count()} of {pkh.threshold})",
                    spend_index=i,
                )

            allowed = set(pkh.pubkeys)
            for pk, _ in spend.seeds.signatures:
                if pk not in allowed:
                    raise InvalidSigner(f"has invalid signer {pk}", spend_index=i)

class SigningStatus(BaseModel):
    spend_index: int
    threshold: int
    signed: List[str]
    pending: List[str]
    complete: bool

class SigningPayload(BaseModel):
    spend_index: int
    transaction: Transaction

# --- API Models ---
class BuildRequest(BaseModel):
    notes: List[Note]
    outputs: List[Output]

class SpendRequest(BaseModel):
    transaction: Transaction
    spend_index: int

class SignatureRequest(BaseModel):
    transaction: Transaction
    spend_index: int
    pubkey: str = Field(..., description="Public key of the co-signer submitting the signature.")
    signature: str = Field(..., description="Signature over the spend's message hash, opaque to the server.")

class ValidateRequest(BaseModel):
    transaction: Transaction

class SpendHashResponse(BaseModel):
    spend_index: int
    message_hash: str

class ValidationResponse(BaseModel):
    message: str
