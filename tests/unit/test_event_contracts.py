"""
Tests for JSON Schema Contract Validators и моделей событий

Проверяет:
- Валидность самих схем (meta-validation)
- Валидацию событий, сериализованных из Pydantic моделей
- Детекцию нарушений required / типов / const / additionalProperties
- Границы u256
"""

import json
from pathlib import Path

import pytest
from jsonschema import Draft202012Validator, ValidationError
from pydantic import ValidationError as ModelValidationError

from tiered_tokens.core.contracts import (
    EVENT_SCHEMAS,
    EventContractValidator,
    SchemaLoader,
    validate_event,
)
from tiered_tokens.core.domain.events import (
    Approval,
    EventType,
    TierAdded,
    TokenCreated,
    TokensBurned,
    TokensMinted,
    Transfer,
)
from tiered_tokens.core.math.checked_uint import UINT256_MAX

TOKEN = "0xtoken"


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def sample_events():
    """По одному валидному событию каждого типа."""
    return [
        TokenCreated(token=TOKEN, creator="0xcreator", name="Coin", symbol="CN"),
        TierAdded(token=TOKEN, tier_id=0, name="Early", supply=100, price=5),
        TokensMinted(token=TOKEN, tier_id=0, recipient="0xr", amount=10, price=5, attached_value=50),
        TokensBurned(token=TOKEN, holder="0xcreator", amount=3),
        Transfer(token=TOKEN, sender="0xa", recipient="0xb", amount=1),
        Approval(token=TOKEN, owner="0xa", spender="0xb", amount=7),
    ]


@pytest.fixture
def minted_dict():
    return TokensMinted(
        token=TOKEN, tier_id=0, recipient="0xr", amount=10, price=5, attached_value=50
    ).to_dict()


# =============================================================================
# SCHEMAS
# =============================================================================


class TestSchemaFiles:
    def test_every_event_type_has_schema(self):
        assert set(EVENT_SCHEMAS) == {t.value for t in EventType}

    def test_schemas_are_valid_json_schema(self):
        schema_dir = Path(__file__).parents[2] / "src" / "tiered_tokens" / "core" / "contracts" / "schema"
        for schema_name in EVENT_SCHEMAS.values():
            with open(schema_dir / f"{schema_name}.json", "r", encoding="utf-8") as f:
                Draft202012Validator.check_schema(json.load(f))

    def test_loader_caches(self):
        loader = SchemaLoader()
        assert loader.load_schema("transfer") is loader.load_schema("transfer")

    def test_loader_missing_schema(self):
        with pytest.raises(FileNotFoundError):
            SchemaLoader().load_schema("does_not_exist")

    def test_loader_missing_directory(self, tmp_path):
        with pytest.raises(RuntimeError):
            SchemaLoader(tmp_path / "nowhere")

    def test_loader_rejects_invalid_schema(self, tmp_path):
        (tmp_path / "broken.json").write_text(json.dumps({"type": 12}), encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")


# =============================================================================
# VALIDATION
# =============================================================================


class TestEventValidation:
    def test_all_models_match_contracts(self, sample_events):
        for event in sample_events:
            validate_event(event.to_dict())

    def test_sequenced_event_is_valid(self, sample_events):
        validate_event(sample_events[0].with_sequence(42).to_dict())

    def test_missing_required_field(self, minted_dict):
        del minted_dict["recipient"]

        with pytest.raises(ValidationError):
            validate_event(minted_dict)

    def test_wrong_type(self, minted_dict):
        minted_dict["amount"] = "10"

        with pytest.raises(ValidationError):
            validate_event(minted_dict)

    def test_unknown_field_rejected(self, minted_dict):
        minted_dict["refund"] = 0

        with pytest.raises(ValidationError):
            validate_event(minted_dict)

    def test_u256_bounds(self, minted_dict):
        minted_dict["amount"] = UINT256_MAX
        validate_event(minted_dict)

        minted_dict["amount"] = UINT256_MAX + 1
        with pytest.raises(ValidationError):
            validate_event(minted_dict)

    def test_missing_event_type(self, minted_dict):
        del minted_dict["event_type"]

        with pytest.raises(ValueError, match="event_type is required"):
            validate_event(minted_dict)

    def test_unknown_event_type(self, minted_dict):
        minted_dict["event_type"] = "Refunded"

        with pytest.raises(ValueError, match="Unknown event type"):
            validate_event(minted_dict)

    def test_validator_cached_per_type(self):
        first = EventContractValidator.for_event_type(EventType.TRANSFER)
        second = EventContractValidator.for_event_type("Transfer")

        assert first is second
        assert first.schema_name == "transfer"

    def test_is_valid_and_iter_errors(self, minted_dict):
        validator = EventContractValidator.for_event_type("TokensMinted")
        assert validator.is_valid(minted_dict)

        minted_dict["price"] = -1
        assert not validator.is_valid(minted_dict)
        assert len(list(validator.iter_errors(minted_dict))) == 1


# =============================================================================
# PYDANTIC MODELS
# =============================================================================


class TestEventModels:
    def test_event_frozen(self, sample_events):
        with pytest.raises(ModelValidationError):
            sample_events[0].token = "0xother"

    def test_with_sequence_returns_copy(self, sample_events):
        event = sample_events[1]
        stamped = event.with_sequence(5)

        assert stamped.sequence == 5
        assert event.sequence == 0
        assert stamped.tier_id == event.tier_id

    def test_event_type_fixed_per_model(self, sample_events):
        assert [e.event_type for e in sample_events] == [t.value for t in EventType]

    def test_negative_amount_rejected(self):
        with pytest.raises(ModelValidationError):
            Transfer(token=TOKEN, sender="0xa", recipient="0xb", amount=-1)
