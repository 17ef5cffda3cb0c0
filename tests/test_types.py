"""Unit tests for the pipeline value types and their JSON shape."""

import dataclasses

import pytest

from rcon_bridge.types import ExecutionOutcome, PipelineResult, RequestedItem, ValidationOutcome


@pytest.mark.unit
class TestRequestedItem:
    def test_from_dict_player_key(self):
        item = RequestedItem.from_dict({"itemName": "bread", "quantity": 5, "player": "Steve"})
        assert item == RequestedItem("bread", 5, "Steve")

    def test_from_dict_owner_alias(self):
        item = RequestedItem.from_dict({"itemName": "torch", "quantity": "16", "owner": "Alex"})
        assert item == RequestedItem("torch", 16, "Alex")

    def test_to_dict(self):
        assert RequestedItem("bread", 5, "Steve").to_dict() == {
            "itemName": "bread",
            "quantity": 5,
            "player": "Steve",
        }

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            RequestedItem("bread", 5, "Steve").quantity = 6


@pytest.mark.unit
def test_validation_outcome_is_valid():
    assert ValidationOutcome().is_valid
    assert not ValidationOutcome(general_errors=("bad",)).is_valid


@pytest.mark.unit
def test_execution_outcome_success():
    assert ExecutionOutcome(responses=("ok",)).success
    assert not ExecutionOutcome(errors=("RCON connection failed: refused",)).success


@pytest.mark.unit
def test_pipeline_result_omits_absent_sections():
    data = PipelineResult(success=True, message="Nothing to do.", ts=1700000000000).to_dict()

    assert data == {
        "success": True,
        "message": "Nothing to do.",
        "commands": [],
        "itemsRequested": [],
        "dryRun": False,
        "ts": 1700000000000,
    }


@pytest.mark.unit
def test_pipeline_result_timestamp_defaults_to_now():
    assert PipelineResult(success=True, message="").ts > 1_600_000_000_000
