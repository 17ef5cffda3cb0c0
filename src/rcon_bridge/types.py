"""Immutable value types that flow through the command pipeline.

These frozen dataclasses are the inputs and outputs of each pipeline
stage: the generator's output (:class:`GeneratedCommands`), the item
validator's verdict (:class:`ValidationOutcome`), the executor's per-command
diagnostics (:class:`ExecutionOutcome`), and the single
:class:`PipelineResult` returned to the HTTP boundary.

Wire format
-----------
Every type exposes ``to_dict()`` producing the camelCase JSON shape the
HTTP surface returns.  Requested items use the key ``player`` for their
owner because that is the field name the command generator emits and
callers already consume.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class RequestedItem:
    """One item the caller asked for.

    Attributes:
        item_name: Catalog identifier as produced by the generator, e.g.
                   ``"bread"`` or ``"diamond_pickaxe"``.  Matched
                   case-insensitively; stored exactly as received.
        quantity:  Requested count.  Accepted only within ``[1, 64]``.
        owner:     In-game username that will receive the item.
    """

    item_name: str
    quantity: int
    owner: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RequestedItem:
        """Build from the generator's ``{itemName, quantity, player}`` shape.

        ``owner`` is accepted as an alias of ``player``.
        """
        return cls(
            item_name=str(data["itemName"]),
            quantity=int(data["quantity"]),
            owner=str(data.get("player", data.get("owner", ""))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"itemName": self.item_name, "quantity": self.quantity, "player": self.owner}


@dataclass(frozen=True)
class InvalidItem:
    """A requested item whose name is not in the catalog.

    Attributes:
        item:        The original request, unchanged.
        suggestions: Up to three catalog entries offered instead, in
                     tier order.  May be empty.
    """

    item: RequestedItem
    suggestions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {**self.item.to_dict(), "suggestions": list(self.suggestions)}


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of validating one batch of requested items.

    Created fresh per :meth:`~rcon_bridge.catalog.validator.ItemValidator.validate`
    call and never persisted.  An item that fails the quantity check
    appears in neither bucket; it only contributes a general error.
    """

    valid_items: tuple[RequestedItem, ...] = ()
    invalid_items: tuple[InvalidItem, ...] = ()
    general_errors: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.invalid_items and not self.general_errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "validItems": [item.to_dict() for item in self.valid_items],
            "invalidItems": [item.to_dict() for item in self.invalid_items],
            "generalErrors": list(self.general_errors),
        }


@dataclass(frozen=True)
class ExecutionOutcome:
    """Per-command diagnostics from one executor run.

    Exactly one entry lands in ``responses`` or ``errors`` per command
    attempted, in input order.  A connection failure yields a single entry
    in ``errors`` and nothing in ``responses``.
    """

    responses: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "responses": list(self.responses),
            "errors": list(self.errors),
        }


@dataclass(frozen=True)
class GeneratedCommands:
    """Output of the natural-language command generator.

    The pipeline treats this as already player-substituted: the generic
    ``player`` placeholder has been replaced by the resolved username.

    Attributes:
        commands:        Console commands to run, in order, without a
                         leading slash.
        items_requested: Items referenced by ``give`` commands.  Empty for
                         commands that do not hand out items.
        spoken_response: Optional conversational summary for the caller.
        reasoning:       Short explanation of how the request was read.
    """

    commands: tuple[str, ...] = ()
    items_requested: tuple[RequestedItem, ...] = ()
    spoken_response: str = ""
    reasoning: str = ""


@dataclass(frozen=True)
class PipelineResult:
    """The single structured result of one pipeline pass.

    Constructed once per incoming request and never mutated afterwards.
    ``validation`` is ``None`` when no items were requested; ``execution``
    is ``None`` when execution was not attempted (validation failure,
    dry-run, or an empty command list).
    """

    success: bool
    message: str
    commands: tuple[str, ...] = ()
    items_requested: tuple[RequestedItem, ...] = ()
    validation: ValidationOutcome | None = None
    execution: ExecutionOutcome | None = None
    dry_run: bool = False
    target_player: str | None = None
    reasoning: str | None = None
    error: str | None = None
    ts: int = field(default_factory=_now_ms)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape returned by ``POST /voice``.

        Optional sections are omitted rather than sent as ``null``.
        """
        data: dict[str, Any] = {
            "success": self.success,
            "message": self.message,
            "commands": list(self.commands),
            "itemsRequested": [item.to_dict() for item in self.items_requested],
            "dryRun": self.dry_run,
            "ts": self.ts,
        }
        if self.validation is not None:
            data["validation"] = self.validation.to_dict()
        if self.execution is not None:
            data["rconResult"] = self.execution.to_dict()
        if self.target_player is not None:
            data["targetPlayer"] = self.target_player
        if self.reasoning is not None:
            data["reasoning"] = self.reasoning
        if self.error is not None:
            data["error"] = self.error
        return data
