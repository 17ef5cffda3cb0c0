"""Unit tests for CommandPipeline state transitions and messages."""

import pytest

from rcon_bridge.catalog import ItemCatalog, ItemValidator
from rcon_bridge.pipeline import (
    CommandPipeline,
    describe_invalid_item,
    summarize_items,
    summarize_validation_failure,
)
from rcon_bridge.rcon import CommandExecutor
from rcon_bridge.types import (
    GeneratedCommands,
    InvalidItem,
    RequestedItem,
    ValidationOutcome,
)
from tests.fakes import FakeSessionFactory, bread_request


@pytest.fixture
def pipeline(validator, session_factory):
    return CommandPipeline(validator=validator, executor=CommandExecutor(session_factory))


# ============================================================================
# MESSAGE HELPERS
# ============================================================================


@pytest.mark.unit
class TestMessages:
    def test_invalid_item_with_suggestions(self):
        invalid = InvalidItem(RequestedItem("bred", 5, "alice"), ("bread", "torch"))
        assert describe_invalid_item(invalid) == 'Unknown item "bred". Did you mean: bread, torch?'

    def test_invalid_item_without_suggestions(self):
        invalid = InvalidItem(RequestedItem("xyzzy", 1, "alice"))
        assert (
            describe_invalid_item(invalid)
            == 'Unknown item "xyzzy" and no similar items were found.'
        )

    def test_validation_failure_lists_general_errors_first(self):
        outcome = ValidationOutcome(
            invalid_items=(InvalidItem(RequestedItem("bred", 5, "alice"), ("bread",)),),
            general_errors=("Invalid quantity 100 for stone. Must be between 1 and 64.",),
        )
        assert summarize_validation_failure(outcome) == (
            "Invalid quantity 100 for stone. Must be between 1 and 64. "
            'Unknown item "bred". Did you mean: bread?'
        )

    def test_summarize_items(self):
        items = [RequestedItem("bread", 5, "alice"), RequestedItem("torch", 16, "alice")]
        assert summarize_items(items) == "bread x5, torch x16"


# ============================================================================
# VALIDATING
# ============================================================================


@pytest.mark.unit
class TestValidation:
    def test_valid_items_are_executed(self, pipeline, session_factory):
        result = pipeline.run(bread_request(), target_player="alice")

        assert result.success
        assert result.message == "bread x5"
        assert result.validation is not None and result.validation.is_valid
        assert result.execution is not None and result.execution.success
        assert session_factory.last.sent == ["give alice bread 5"]
        assert result.target_player == "alice"

    def test_invalid_item_stops_before_execution(self, pipeline, session_factory):
        generated = GeneratedCommands(
            commands=("give alice bred 5",),
            items_requested=(RequestedItem("bred", 5, "alice"),),
        )

        result = pipeline.run(generated)

        assert not result.success
        assert result.message.startswith('Unknown item "bred". Did you mean: bread')
        assert result.execution is None
        assert session_factory.sessions == []

    def test_bad_quantity_stops_before_execution(self, pipeline, session_factory):
        generated = GeneratedCommands(
            commands=("give alice stone 100",),
            items_requested=(RequestedItem("stone", 100, "alice"),),
        )

        result = pipeline.run(generated)

        assert not result.success
        assert "100" in result.message
        assert result.items_requested == ()
        assert session_factory.sessions == []

    def test_no_items_skips_validation(self, pipeline, session_factory):
        result = pipeline.run(GeneratedCommands(commands=("god alice",)))

        assert result.success
        assert result.validation is None
        assert result.message == "Executed 1 command(s)."
        assert session_factory.last.sent == ["god alice"]

    def test_unloaded_catalog_reports_unavailable(self, session_factory):
        pipeline = CommandPipeline(
            validator=ItemValidator(ItemCatalog()),
            executor=CommandExecutor(session_factory),
        )

        result = pipeline.run(bread_request())

        assert not result.success
        assert result.message == "Item validation unavailable"
        assert "not loaded" in result.error
        assert session_factory.sessions == []


# ============================================================================
# EXECUTING
# ============================================================================


@pytest.mark.unit
class TestExecution:
    def test_dry_run_never_connects(self, validator, session_factory):
        pipeline = CommandPipeline(
            validator=validator, executor=CommandExecutor(session_factory), dry_run=True
        )

        result = pipeline.run(bread_request())

        assert result.success
        assert result.dry_run is True
        assert result.execution is None
        assert result.commands == ("give alice bread 5",)
        assert session_factory.sessions == []

    def test_per_call_dry_run_override(self, pipeline, session_factory):
        result = pipeline.run(GeneratedCommands(commands=("god alice",)), dry_run=True)

        assert result.message == "Dry run: 1 command(s) not executed."
        assert session_factory.sessions == []

    def test_per_call_override_can_disable_dry_run(self, validator, session_factory):
        pipeline = CommandPipeline(
            validator=validator, executor=CommandExecutor(session_factory), dry_run=True
        )

        result = pipeline.run(bread_request(), dry_run=False)

        assert result.dry_run is False
        assert len(session_factory.sessions) == 1

    def test_empty_command_list_does_not_connect(self, pipeline, session_factory):
        result = pipeline.run(GeneratedCommands())

        assert result.success
        assert result.message == "Nothing to do."
        assert session_factory.sessions == []

    def test_connection_failure(self, validator, failing_connect_factory):
        pipeline = CommandPipeline(
            validator=validator, executor=CommandExecutor(failing_connect_factory)
        )

        result = pipeline.run(bread_request())

        assert not result.success
        assert result.message == "RCON execution failed: RCON connection failed: connection refused"
        assert result.error == "RCON connection failed: connection refused"
        assert result.execution is not None

    def test_partial_command_failure(self, validator):
        factory = FakeSessionFactory(failing_commands={"fly alice"})
        pipeline = CommandPipeline(validator=validator, executor=CommandExecutor(factory))

        result = pipeline.run(GeneratedCommands(commands=("god alice", "fly alice")))

        assert not result.success
        assert result.execution.responses == ("ok: god alice",)
        assert result.error == 'Command "fly alice" failed: server went away'


# ============================================================================
# DONE
# ============================================================================


@pytest.mark.unit
class TestDone:
    def test_spoken_response_preferred(self, pipeline):
        generated = GeneratedCommands(
            commands=("give alice bread 5",),
            items_requested=(RequestedItem("bread", 5, "alice"),),
            spoken_response="  Here's some bread!  ",
        )

        assert pipeline.run(generated).message == "Here's some bread!"

    def test_reasoning_carried_through(self, pipeline):
        result = pipeline.run(bread_request())
        assert result.reasoning == "User asked for bread"

    def test_result_to_dict(self, pipeline):
        data = pipeline.run(bread_request(), target_player="alice").to_dict()

        assert data["success"] is True
        assert data["itemsRequested"] == [{"itemName": "bread", "quantity": 5, "player": "alice"}]
        assert data["rconResult"]["responses"] == ["ok: give alice bread 5"]
        assert data["validation"]["isValid"] is True
        assert data["targetPlayer"] == "alice"
        assert data["dryRun"] is False
        assert isinstance(data["ts"], int)
        assert "error" not in data

    def test_dry_run_result_omits_rcon_result(self, pipeline):
        data = pipeline.run(bread_request(), dry_run=True).to_dict()
        assert data["dryRun"] is True
        assert "rconResult" not in data
