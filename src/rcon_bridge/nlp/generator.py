"""Natural-language to console-command generator.

``OllamaCommandGenerator`` asks a locally-hosted model (via the Ollama
``/api/chat`` endpoint) to turn one utterance into a JSON object::

    {
      "commands":       ["give player bread 5"],
      "reasoning":      "User asked for bread",
      "itemsRequested": [{"itemName": "bread", "quantity": 5, "player": "player"}],
      "spokenResponse": "Here's some bread!"          (optional)
    }

The model is told to write the literal placeholder ``player`` for the
target.  :meth:`generate` replaces it (whole word only) with the resolved
username in every command, and in every item whose ``player`` is the
placeholder, before handing a :class:`~rcon_bridge.types.GeneratedCommands`
to the pipeline.

Failure mode
------------
Unlike the rest of the pipeline this is an external call with its own
failure mode: any transport error, non-2xx status, non-JSON content, or
wrong shape raises :class:`~rcon_bridge.errors.GenerationError`.  The
caller turns that into an unsuccessful result.  There are no retries.

Sync vs async
-------------
Uses the synchronous ``requests`` library.  FastAPI runs the sync
``/voice`` handler in its thread pool, so the blocking call does not stall
the event loop.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import requests

from rcon_bridge.config import NlpSettings
from rcon_bridge.errors import GenerationError
from rcon_bridge.types import GeneratedCommands, RequestedItem

logger = logging.getLogger(__name__)

PLAYER_PLACEHOLDER = "player"

_PLACEHOLDER_RE = re.compile(rf"\b{PLAYER_PLACEHOLDER}\b")

SYSTEM_PROMPT = """You are a Minecraft command interpreter. Convert natural language requests into valid RCON commands.

AVAILABLE COMMANDS:
- give <player> <item> <quantity> - Give items to player
- god <player> - Toggle invincibility for player
- fly <player> - Toggle flight for player
- sethome <player> <name> - Set a home location
- home <player> <name> - Teleport to saved home location
- tp <player> <target/coordinates> - Teleport player
- tellraw <player> <message> - Send message to player

ITEM NAMING RULES:
- Use exact Minecraft item IDs (lowercase with underscores)
- Examples: bread, diamond_pickaxe, stone, torch, iron_ingot
- Common quantities: bread=5, tools=1, blocks=16, food=5
- Maximum quantity per item: 64

PLAYER TARGETING:
- Always write the literal word "player" where the target player goes
- Only name a different player when the user explicitly asks for one

RULES:
1. Only generate commands for actions clearly requested by the user
2. Use reasonable default quantities (bread=5, pickaxe=1, blocks=16)
3. For give commands, list every item in itemsRequested
4. For non-item commands (god, fly, home, tp), leave itemsRequested empty
5. Keep reasoning brief; spokenResponse is one friendly sentence for the user

Examples:
- "give me bread" -> commands: ["give player bread 5"], itemsRequested: [{"itemName": "bread", "quantity": 5, "player": "player"}]
- "turn on god mode" -> commands: ["god player"], itemsRequested: []
- "let me fly" -> commands: ["fly player"], itemsRequested: []

RESPONSE FORMAT:
Return only a JSON object with exactly these fields:
- commands: array of command strings
- reasoning: brief explanation string
- itemsRequested: array of objects with itemName, quantity, player fields
- spokenResponse: short sentence to read back to the user"""


def substitute_player(text: str, target_player: str) -> str:
    """Replace the whole-word ``player`` placeholder with ``target_player``."""
    return _PLACEHOLDER_RE.sub(lambda _match: target_player, text)


def parse_generation(content: str, target_player: str) -> GeneratedCommands:
    """Parse the model's JSON reply into player-substituted commands.

    Raises:
        GenerationError: ``content`` is not a JSON object of the expected shape.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise GenerationError(f"Model returned invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise GenerationError("Model response is not a JSON object")

    raw_commands = data.get("commands", [])
    raw_items = data.get("itemsRequested", [])
    if not isinstance(raw_commands, list) or not all(isinstance(c, str) for c in raw_commands):
        raise GenerationError("'commands' must be a list of strings")
    if not isinstance(raw_items, list):
        raise GenerationError("'itemsRequested' must be a list")

    commands = tuple(
        substitute_player(command.strip(), target_player)
        for command in raw_commands
        if command.strip()
    )

    items: list[RequestedItem] = []
    for raw in raw_items:
        try:
            item = RequestedItem.from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise GenerationError(f"Malformed itemsRequested entry {raw!r}") from exc
        if not item.owner or item.owner == PLAYER_PLACEHOLDER:
            item = RequestedItem(item.item_name, item.quantity, target_player)
        items.append(item)

    return GeneratedCommands(
        commands=commands,
        items_requested=tuple(items),
        spoken_response=str(data.get("spokenResponse") or ""),
        reasoning=str(data.get("reasoning") or ""),
    )


class OllamaCommandGenerator:
    """Synchronous command generator backed by Ollama ``/api/chat``.

    Attributes:
        _api_endpoint: Full ``/api/chat`` URL.
        _model:        Ollama model tag.
        _temperature:  Sampling temperature; kept low for stable commands.
        _timeout:      HTTP request timeout in seconds.
    """

    def __init__(
        self,
        *,
        api_endpoint: str,
        model: str,
        temperature: float = 0.1,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._api_endpoint = api_endpoint
        self._model = model
        self._temperature = temperature
        self._timeout = timeout_seconds

    @classmethod
    def from_settings(cls, settings: NlpSettings) -> OllamaCommandGenerator:
        return cls(
            api_endpoint=settings.api_endpoint,
            model=settings.model,
            temperature=settings.temperature,
            timeout_seconds=settings.timeout_seconds,
        )

    def generate(self, utterance: str, target_player: str) -> GeneratedCommands:
        """Turn ``utterance`` into commands aimed at ``target_player``.

        Raises:
            GenerationError: On any transport, HTTP, or parsing failure.
        """
        payload = self._build_payload(utterance, target_player)
        try:
            response = requests.post(self._api_endpoint, json=payload, timeout=self._timeout)
            response.raise_for_status()
            content = response.json().get("message", {}).get("content", "")
            if not isinstance(content, str):
                raise ValueError(f"message content is {type(content).__name__}, not text")
        except requests.exceptions.Timeout as exc:
            logger.warning(
                "Command generation timed out after %.1fs (endpoint=%s)",
                self._timeout,
                self._api_endpoint,
            )
            raise GenerationError(f"Failed to generate commands: timed out: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            logger.error("Command generation request failed: %s", exc)
            raise GenerationError(f"Failed to generate commands: {exc}") from exc
        except (ValueError, AttributeError) as exc:
            raise GenerationError(f"Failed to generate commands: bad response body: {exc}") from exc

        if not content or not content.strip():
            raise GenerationError("Failed to generate commands: empty model response")

        generated = parse_generation(content, target_player)
        logger.info(
            "Generated %d command(s) for %s: %s",
            len(generated.commands),
            target_player,
            generated.reasoning,
        )
        return generated

    def _build_payload(self, utterance: str, target_player: str) -> dict[str, Any]:
        prompt = (
            f'User request: "{utterance}"\n'
            f'Target player: "{target_player}"\n\n'
            "Convert this request into appropriate Minecraft RCON commands."
        )
        return {
            "model": self._model,
            "stream": False,
            "format": "json",
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "options": {"temperature": self._temperature},
        }
