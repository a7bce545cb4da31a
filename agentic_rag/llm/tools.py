"""Tool schemas advertised to the model and helpers to decode tool calls."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic import ValidationError as PydanticValidationError

from agentic_rag.llm.base_provider import Tool
from agentic_rag.utils.exceptions import ToolArgumentsError

SEARCH_TOOL_NAME = "search_metadata"
SEARCH_TOOL_DESCRIPTION = "Search metadata in database or API from a query"


class SearchMetadataArguments(BaseModel):
    """Arguments of the search_metadata tool."""

    model_config = ConfigDict(extra="ignore")

    query: StrictStr


def create_search_tool() -> Tool:
    """Create the retrieval tool declaration."""
    return Tool(
        name=SEARCH_TOOL_NAME,
        description=SEARCH_TOOL_DESCRIPTION,
        parameters={
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Text to search in metadata",
                },
            },
            "required": ["query"],
        },
    )


def parse_tool_arguments(arguments: str) -> dict[str, Any]:
    """Decode JSON-encoded tool call arguments into a dict.

    Raises:
        ToolArgumentsError: If the arguments are not a JSON object
    """
    try:
        args = json.loads(arguments)
    except (TypeError, ValueError) as e:
        raise ToolArgumentsError(f"failed to parse tool arguments: {e}") from e

    if not isinstance(args, dict):
        raise ToolArgumentsError("tool arguments must be a JSON object")
    return args


def parse_search_arguments(arguments: str) -> SearchMetadataArguments:
    """Decode search_metadata arguments.

    Raises:
        ToolArgumentsError: If the JSON is malformed or ``query`` is missing
            or not a string
    """
    args = parse_tool_arguments(arguments)
    try:
        return SearchMetadataArguments.model_validate(args)
    except PydanticValidationError as e:
        raise ToolArgumentsError(f"invalid {SEARCH_TOOL_NAME} arguments: {e}") from e
