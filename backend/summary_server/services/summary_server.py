"""
System Summary Instructions MCP server

Exposes the instruction document through the three MCP access shapes:

- tool     generate-system-summary-instructions  (per-call outputPath override)
- resource instructions://system-summary         (session configuration only)
- prompt   system-summary-template               (conversational wrapper)

Every call builds a fresh document; the server holds nothing but its
immutable session configuration.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from summary_server.core.config import ServerConfig, settings
from summary_server.prompts.summary_instructions import TEMPLATE_CHECKLIST, TEMPLATE_PREAMBLE
from summary_server.schemas.mcp import (
    CallToolResult,
    GenerateInstructionsArguments,
    GetPromptResult,
    PromptArgument,
    PromptDefinition,
    PromptMessage,
    ReadResourceResult,
    ResourceDefinition,
    SummaryTemplateArguments,
    TextContent,
    TextResourceContents,
    ToolDefinition,
)
from summary_server.services.instructions import (
    build_system_summary_instructions,
    render_instructions_json,
)
from summary_server.services.jsonrpc import INVALID_PARAMS, McpError

logger = logging.getLogger(__name__)

TOOL_NAME = "generate-system-summary-instructions"
RESOURCE_NAME = "system-summary-instructions"
RESOURCE_URI = "instructions://system-summary"
PROMPT_NAME = "system-summary-template"

GENERATE_INSTRUCTIONS_TOOL = ToolDefinition(
    name=TOOL_NAME,
    title="Generate System Summary Instructions",
    description=(
        "Returns complete JSON instructions for generating a system summary. Cursor should use these "
        "instructions to inspect the codebase and generate a comprehensive codebase_summary.md file."
    ),
    inputSchema={
        "type": "object",
        "properties": {
            "outputPath": {
                "type": "string",
                "description": GenerateInstructionsArguments.model_fields["outputPath"].description,
            },
        },
        "additionalProperties": False,
    },
)

INSTRUCTIONS_RESOURCE = ResourceDefinition(
    name=RESOURCE_NAME,
    title="System Summary Instructions Reference",
    uri=RESOURCE_URI,
    description=(
        "Read-only reference documentation for the system summary instruction structure. Use this to "
        "understand the format and requirements for generating codebase summaries."
    ),
)

SUMMARY_TEMPLATE_PROMPT = PromptDefinition(
    name=PROMPT_NAME,
    title="System Summary Template",
    description=(
        "Provides a reusable prompt template for generating system summaries. Use this when the user "
        "wants to generate a summary with specific focus areas."
    ),
    arguments=[
        PromptArgument(
            name=name,
            description=field.description,
            required=False,
        )
        for name, field in SummaryTemplateArguments.model_fields.items()
    ],
)


def _validate_arguments(model: type, arguments: Optional[Dict[str, Any]], target: str) -> BaseModel:
    try:
        return model.model_validate(arguments or {})
    except ValidationError as e:
        raise McpError(
            INVALID_PARAMS,
            f"Invalid arguments for {target}",
            data=e.errors(include_url=False, include_context=False),
        ) from e


def compose_summary_prompt(
    instructions_json: str,
    codebase_path: Optional[str] = None,
    focus_area: Optional[str] = None,
) -> str:
    """Wrap the instruction JSON into the user message sent by the template prompt."""
    prompt_text = f"{TEMPLATE_PREAMBLE}\n\n{instructions_json}\n\n"

    if codebase_path:
        prompt_text += f"Codebase path: {codebase_path}\n"

    if focus_area:
        prompt_text += f"Focus area: {focus_area}\n\nPlease emphasize the {focus_area} components in your summary.\n"

    prompt_text += TEMPLATE_CHECKLIST
    return prompt_text


class SummaryInstructionsServer:
    """
    MCP capability set bound to one session configuration.

    Cheap to construct; the transports create one per session (or per
    request when running stateless).
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        server_name: str = settings.SERVER_NAME,
        server_version: str = settings.SERVER_VERSION,
    ):
        self.config = config or ServerConfig()
        self.server_name = server_name
        self.server_version = server_version

    # Listing

    def list_tools(self) -> List[Dict[str, Any]]:
        return [GENERATE_INSTRUCTIONS_TOOL.model_dump()]

    def list_resources(self) -> List[Dict[str, Any]]:
        return [INSTRUCTIONS_RESOURCE.model_dump()]

    def list_resource_templates(self) -> List[Dict[str, Any]]:
        return []

    def list_prompts(self) -> List[Dict[str, Any]]:
        return [SUMMARY_TEMPLATE_PROMPT.model_dump()]

    # Access surfaces

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run the generate-system-summary-instructions tool.

        The outputPath argument wins over the session's outputDirectory,
        which wins over the "workspace root" fallback.

        Raises:
            McpError: Unknown tool name or malformed arguments.
        """
        if name != TOOL_NAME:
            raise McpError(INVALID_PARAMS, f"Unknown tool: {name}")

        args = _validate_arguments(GenerateInstructionsArguments, arguments, f"tool '{name}'")
        instructions = build_system_summary_instructions(args.outputPath or self.config.output_directory)

        logger.info("Generated system summary instructions (location=%s)", instructions.output_file.location)
        result = CallToolResult(content=[TextContent(text=render_instructions_json(instructions))])
        return result.model_dump()

    def read_resource(self, uri: str) -> Dict[str, Any]:
        """
        Read the instructions://system-summary resource.

        Only the session configuration shapes the document; the resource
        takes no per-call parameters.
        """
        if uri != RESOURCE_URI:
            raise McpError(INVALID_PARAMS, f"Resource not found: {uri}", data={"uri": uri})

        instructions = build_system_summary_instructions(self.config.output_directory)
        result = ReadResourceResult(
            contents=[
                TextResourceContents(
                    uri=uri,
                    text=render_instructions_json(instructions),
                    mimeType="application/json",
                )
            ]
        )
        return result.model_dump()

    def get_prompt(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Render the system-summary-template prompt.

        codebasePath and focusArea only add lines to the message; they never
        change the embedded document.
        """
        if name != PROMPT_NAME:
            raise McpError(INVALID_PARAMS, f"Unknown prompt: {name}")

        args = _validate_arguments(SummaryTemplateArguments, arguments, f"prompt '{name}'")
        instructions = build_system_summary_instructions(self.config.output_directory)
        prompt_text = compose_summary_prompt(
            render_instructions_json(instructions),
            codebase_path=args.codebasePath,
            focus_area=args.focusArea,
        )

        result = GetPromptResult(
            messages=[PromptMessage(role="user", content=TextContent(text=prompt_text))]
        )
        return result.model_dump(exclude_none=True)
