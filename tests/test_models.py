"""
Tests for the condition model, the signature accumulator and the validator.
"""

import pytest

from multisig.core.errors import (
    BalanceMismatch, DuplicatePublicKey, ErrorKind, InsufficientSignatures,
    InvalidSigner, InvalidThreshold, ThresholdExceedsKeys,
)
from multisig.core.models import PkhCondition, Seeds, Transaction


def build_tx(make_note, make_output, notes=None, outputs=None):
    notes = notes if notes is not None else [make_note()]
    outputs = outputs if outputs is not None else [make_output()]
    return Transaction.model_validate({
        "spends": [{"note": n, "seeds": {"message_hash": "h", "signatures": []}} for n in notes],
        "outputs": outputs,
    })


class TestPkhCondition:

    def test_valid_condition(self):
        PkhCondition(threshold=2, pubkeys=["A", "B", "C"]).validate_condition()

    def test_threshold_equal_to_key_count_is_valid(self):
        PkhCondition(threshold=3, pubkeys=["A", "B", "C"]).validate_condition()

    def test_zero_threshold(self):
        with pytest.raises(InvalidThreshold):
            PkhCondition(threshold=0, pubkeys=["A"]).validate_condition()

    def test_threshold_exceeds_keys(self):
        with pytest.raises(ThresholdExceedsKeys) as exc:
            PkhCondition(threshold=3, pubkeys=["A", "B"]).validate_condition()
        assert exc.value.kind == ErrorKind.THRESHOLD_EXCEEDS_KEYS

    def test_duplicate_key(self):
        with pytest.raises(DuplicatePublicKey):
            PkhCondition(threshold=1, pubkeys=["A", "B", "A"]).validate_condition()

    def test_validation_preserves_key_order(self):
        condition = PkhCondition(threshold=2, pubkeys=["C", "A", "B"])
        condition.validate_condition()
        assert condition.pubkeys == ["C", "A", "B"]
        assert condition.model_dump()["pubkeys"] == ["C", "A", "B"]


class TestSeeds:

    def test_starts_empty(self):
        seeds = Seeds(message_hash="abc")
        assert seeds.signature_count() == 0
        assert not seeds.has_signature("A")

    def test_resubmission_replaces_and_moves_to_end(self):
        seeds = Seeds(message_hash="abc")
        seeds.add_signature("A", "sig-a1")
        seeds.add_signature("B", "sig-b")
        seeds.add_signature("A", "sig-a2")

        assert seeds.signatures == [("B", "sig-b"), ("A", "sig-a2")]
        assert seeds.signature_count() == 2
        assert seeds.message_hash == "abc"

    def test_has_signature(self):
        seeds = Seeds(message_hash="abc")
        seeds.add_signature("A", "sig")
        assert seeds.has_signature("A")
        assert not seeds.has_signature("B")

    def test_count_ignores_repeated_keys_in_imported_data(self):
        seeds = Seeds.model_validate({"message_hash": "abc", "signatures": [["A", "1"], ["A", "2"]]})
        assert seeds.signature_count() == 1


class TestValidateBalance:

    def test_balanced(self, make_note, make_output):
        tx = build_tx(make_note, make_output)
        assert tx.total_input() == tx.total_output() == 100
        tx.validate_balance()

    def test_mutated_value_breaks_balance(self, make_note, make_output):
        tx = build_tx(make_note, make_output)
        tx.outputs[0].value = 99
        with pytest.raises(BalanceMismatch):
            tx.validate_balance()

    def test_multiple_notes_and_outputs(self, make_note, make_output):
        tx = build_tx(
            make_note, make_output,
            notes=[make_note(value=60), make_note(value=40, last="note-2")],
            outputs=[make_output(value=70), make_output(value=30, recipient="carol")],
        )
        tx.validate_balance()


class TestValidateSignatures:

    def test_insufficient_signatures(self, make_note, make_output):
        tx = build_tx(make_note, make_output)
        tx.spends[0].seeds.add_signature("A", "sig")
        with pytest.raises(InsufficientSignatures) as exc:
            tx.validate_signatures()
        assert exc.value.spend_index == 0

    def test_enough_signatures(self, make_note, make_output):
        tx = build_tx(make_note, make_output)
        tx.spends[0].seeds.add_signature("A", "sig")
        tx.spends[0].seeds.add_signature("C", "sig")
        tx.validate_signatures()

    def test_foreign_signer_is_rejected(self, make_note, make_output):
        tx = build_tx(make_note, make_output)
        tx.spends[0].seeds.add_signature("A", "sig")
        tx.spends[0].seeds.add_signature("D", "sig")
        with pytest.raises(InvalidSigner):
            tx.validate_signatures()

    def test_condition_error_is_tagged_with_spend_index(self, make_note, make_output):
        tx = build_tx(
            make_note, make_output,
            notes=[make_note(value=50, threshold=1, pubkeys=["A"]), make_note(value=50, threshold=0)],
        )
        tx.spends[0].seeds.add_signature("A", "sig")
        with pytest.raises(InvalidThreshold) as exc:
            tx.validate_signatures()
        assert exc.value.spend_index == 1
        assert str(exc.value).startswith("Spend 1:")

    def test_stops_at_first_failing_spend(self, make_note, make_output):
        tx = build_tx(
            make_note, make_output,
            notes=[make_note(value=50), make_note(value=50, threshold=0)],
        )
        # Spend 0 has no signatures and spend 1 has a broken condition.
        with pytest.raises(InsufficientSignatures) as exc:
            tx.validate_signatures()
        assert exc.value.spend_index == 0
