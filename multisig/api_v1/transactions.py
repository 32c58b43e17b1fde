from fastapi import APIRouter

from multisig.core import wallet
from multisig.core.config import settings
from multisig.core.crypto import EcdsaVerifier
from multisig.core.models import (
    BuildRequest, SignatureRequest, SigningStatus, SpendHashResponse,
    SpendRequest, Transaction, ValidateRequest, ValidationResponse,
)

router = APIRouter(prefix="/transactions", tags=["Transactions"])

@router.post("/build", response_model=Transaction, summary="Build an Unsigned Transaction")
def build_transaction(request: BuildRequest):
    """
    Creates one spend per note, each with an empty signature set and its
    message hash, and checks that inputs and outputs balance.
    """
    return wallet.create_transaction(request.notes, request.outputs)

@router.post("/hash", response_model=SpendHashResponse, summary="Get the Hash a Spend Signer Must Sign")
def get_spend_hash(request: SpendRequest):
    message_hash = wallet.spend_hash(request.transaction, request.spend_index)
    return SpendHashResponse(spend_index=request.spend_index, message_hash=message_hash)

@router.post("/signatures", response_model=Transaction, summary="Submit a Co-Signer's Signature")
def add_signature(request: SignatureRequest):
    """
    Records a signature for a permitted key, replacing any earlier signature
    from the same key. Returns the updated transaction.
    """
    verifier = EcdsaVerifier() if settings.VERIFY_SIGNATURES else None
    return wallet.submit_signature(
        request.transaction,
        request.spend_index,
        request.pubkey,
        request.signature,
        verifier=verifier,
    )

@router.post("/status", response_model=SigningStatus, summary="Get Signing Progress of a Spend")
def get_signing_status(request: SpendRequest):
    return wallet.signing_status(request.spend_index, request.transaction)

@router.post("/validate", response_model=ValidationResponse, summary="Check Broadcast Readiness")
def validate_transaction(request: ValidateRequest):
    """
    Runs the balance check and then the per-spend signature checks, reporting
    the first failure.
    """
    return ValidationResponse(message=wallet.check_transaction(request.transaction))
