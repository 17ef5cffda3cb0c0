"""Command validation and execution pipeline.

``CommandPipeline`` takes the generator's output for one request and
walks it through three states::

    Validating ──(valid or no items)──▶ Executing ──▶ Done
        │                                  │
        └──────(invalid)──────────▶ Done ◀─┘ (failure or success)

Validating
    Entered only when items were requested.  A failing
    :class:`~rcon_bridge.types.ValidationOutcome` ends the pass with
    ``success=False`` and a message listing the general errors and, per
    invalid item, its suggestions.  Nothing is executed.

Executing
    Entered when validation passed or was skipped, dry-run is off, and
    there is at least one command.  A failing
    :class:`~rcon_bridge.types.ExecutionOutcome` ends the pass with
    ``success=False`` and the collected errors.

Done
    The message is the generator's ``spoken_response`` when present,
    otherwise a summary of the valid items (``"bread x5, torch x16"``).

No state survives between calls; one pipeline instance serves all
requests.  Validation and per-command failures are reported as data in
the :class:`~rcon_bridge.types.PipelineResult`, never raised.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rcon_bridge.catalog.validator import ItemValidator
from rcon_bridge.errors import CatalogError
from rcon_bridge.rcon.executor import CommandExecutor
from rcon_bridge.types import (
    GeneratedCommands,
    InvalidItem,
    PipelineResult,
    RequestedItem,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)


def describe_invalid_item(invalid: InvalidItem) -> str:
    """One sentence naming an unknown item and what it might have meant."""
    name = invalid.item.item_name
    if invalid.suggestions:
        return f'Unknown item "{name}". Did you mean: {", ".join(invalid.suggestions)}?'
    return f'Unknown item "{name}" and no similar items were found.'


def summarize_validation_failure(outcome: ValidationOutcome) -> str:
    parts = list(outcome.general_errors)
    parts.extend(describe_invalid_item(invalid) for invalid in outcome.invalid_items)
    return " ".join(parts)


def summarize_items(items: Sequence[RequestedItem]) -> str:
    return ", ".join(f"{item.item_name} x{item.quantity}" for item in items)


def _describe_batch(count: int, dry_run: bool) -> str:
    if not count:
        return "Nothing to do."
    if dry_run:
        return f"Dry run: {count} command(s) not executed."
    return f"Executed {count} command(s)."


class CommandPipeline:
    """Validates requested items and executes the command batch.

    Attributes:
        dry_run: Default mode.  When ``True`` the pipeline never reaches the
                 Executing state and never contacts the console.
    """

    def __init__(
        self,
        *,
        validator: ItemValidator,
        executor: CommandExecutor,
        dry_run: bool = False,
    ) -> None:
        self._validator = validator
        self._executor = executor
        self.dry_run = dry_run

    def run(
        self,
        generated: GeneratedCommands,
        *,
        dry_run: bool | None = None,
        target_player: str | None = None,
    ) -> PipelineResult:
        """Run one pass for ``generated``.

        Args:
            generated:     Player-substituted generator output.
            dry_run:       Per-call override of the configured mode.
            target_player: Resolved username, echoed into the result.

        Returns:
            The complete :class:`PipelineResult` for this request.
        """
        is_dry_run = self.dry_run if dry_run is None else dry_run
        commands = generated.commands

        def result(success: bool, message: str, **extra) -> PipelineResult:
            return PipelineResult(
                success=success,
                message=message,
                commands=commands,
                dry_run=is_dry_run,
                target_player=target_player,
                reasoning=generated.reasoning or None,
                **extra,
            )

        # ── Validating ────────────────────────────────────────────────────────
        validation: ValidationOutcome | None = None
        valid_items: tuple[RequestedItem, ...] = ()
        if generated.items_requested:
            try:
                validation = self._validator.validate(generated.items_requested)
            except CatalogError as exc:
                logger.error("Item validation unavailable: %s", exc)
                return result(False, "Item validation unavailable", error=str(exc))

            valid_items = validation.valid_items
            if not validation.is_valid:
                return result(
                    False,
                    summarize_validation_failure(validation),
                    items_requested=valid_items,
                    validation=validation,
                )

        # ── Executing ─────────────────────────────────────────────────────────
        execution = None
        if is_dry_run:
            logger.info("Dry run: skipping execution of %d command(s)", len(commands))
        elif commands:
            execution = self._executor.execute_all(commands)
            if not execution.success:
                joined = ", ".join(execution.errors)
                return result(
                    False,
                    f"RCON execution failed: {joined}",
                    items_requested=valid_items,
                    validation=validation,
                    execution=execution,
                    error=joined,
                )

        # ── Done ──────────────────────────────────────────────────────────────
        message = (
            generated.spoken_response.strip()
            or summarize_items(valid_items)
            or _describe_batch(len(commands), is_dry_run)
        )
        return result(
            True,
            message,
            items_requested=valid_items,
            validation=validation,
            execution=execution,
        )
