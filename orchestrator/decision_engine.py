"""
Decision engine: asks the language model whether a query needs a web search.

The model is forced to call the ``search_required`` tool. Its arguments must
be exactly ``{search_required: false}`` or ``{search_required: true, query: str}``;
any other shape is a ClassificationError. There is no fallback to
"no search needed".
"""

import json
from typing import Any

from models.errors import ClassificationError, InvalidQueryError, PipelineError
from models.llm_response import LLMResponse
from models.search import DecisionOutcome
from utils.logger import get_logger

from .inference_gate import InferenceGate
from .prompts import (
    SEARCH_REQUIRED_TOOL,
    SEARCH_REQUIRED_TOOL_CHOICE,
    SEARCH_REQUIRED_TOOL_NAME,
    build_decision_messages,
)

logger = get_logger(__name__)

STAGE = "deciding"
DECISION_MAX_TOKENS = 500


class DecisionEngine:
    def __init__(self, gate: InferenceGate, max_tokens: int = DECISION_MAX_TOKENS):
        self.gate = gate
        self.max_tokens = max_tokens

    async def decide(self, query: str) -> DecisionOutcome:
        """
        Classify one query.

        Raises:
            InvalidQueryError: empty query
            ClassificationError: backend failure or unusable tool call
            PipelineTimeoutError: the model did not answer in time
        """
        if not isinstance(query, str) or not query.strip():
            raise InvalidQueryError("Query must be non-empty text", stage=STAGE)

        try:
            response = await self.gate.chat(
                build_decision_messages(query.strip()),
                stage=STAGE,
                tools=[SEARCH_REQUIRED_TOOL],
                tool_choice=SEARCH_REQUIRED_TOOL_CHOICE,
                max_tokens=self.max_tokens,
                temperature=0.0,
            )
        except PipelineError:
            raise
        except Exception as e:
            logger.error(f"Decision inference failed: {e}", exc_info=True)
            raise ClassificationError(
                f"Error while generating a decision from the language model: {e}",
                stage=STAGE,
                details={"error_type": type(e).__name__},
            ) from e

        logger.debug("Decision response", extra={"extra_fields": response.to_dict()})
        return parse_decision(response)


def _fail(message: str) -> ClassificationError:
    logger.error(message)
    return ClassificationError(message, stage=STAGE)


def parse_decision(response: LLMResponse) -> DecisionOutcome:
    """Validate the forced tool call and convert it into a DecisionOutcome."""
    if len(response.tool_calls) != 1:
        raise _fail(f"Expected exactly one tool call, got {len(response.tool_calls)}")

    tool_call = response.tool_calls[0]
    if tool_call.type != "function" or tool_call.name != SEARCH_REQUIRED_TOOL_NAME:
        raise _fail(f"Invalid tool call response: {tool_call.type} {tool_call.name!r}")

    try:
        arguments: Any = json.loads(tool_call.arguments)
    except (TypeError, ValueError) as e:
        raise _fail("Could not deserialize tool call arguments") from e
    if not isinstance(arguments, dict):
        raise _fail("Tool call arguments are not an object")

    decision = arguments.get("search_required")
    if not isinstance(decision, bool):
        raise _fail("Invalid argument type: search_required")

    if not decision:
        return DecisionOutcome(decision=False)

    rewritten = arguments.get("query")
    if not isinstance(rewritten, str) or not rewritten.strip():
        raise _fail("Invalid argument: 'query' must be a non-empty string when a search is required")

    return DecisionOutcome(decision=True, query=" ".join(rewritten.split()))
