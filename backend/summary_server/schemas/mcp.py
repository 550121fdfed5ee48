from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class GenerateInstructionsArguments(BaseModel):
    """Arguments of the generate-system-summary-instructions tool."""
    model_config = ConfigDict(extra="ignore")

    outputPath: Optional[str] = Field(
        None,
        description="Optional path to override the configured output directory for codebase_summary.md",
    )


class SummaryTemplateArguments(BaseModel):
    """Arguments of the system-summary-template prompt."""
    model_config = ConfigDict(extra="ignore")

    codebasePath: Optional[str] = Field(
        None,
        description="Optional path to the codebase root. If not provided, uses current workspace.",
    )
    focusArea: Optional[str] = Field(
        None,
        description=(
            "Optional focus area for the summary (e.g., 'backend', 'frontend', 'api', 'database'). "
            "If provided, emphasize this area in the summary."
        ),
    )


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    content: List[TextContent]


class TextResourceContents(BaseModel):
    uri: str
    text: str
    mimeType: str = "application/json"


class ReadResourceResult(BaseModel):
    contents: List[TextResourceContents]


class PromptMessage(BaseModel):
    role: Literal["user", "assistant"] = "user"
    content: TextContent


class GetPromptResult(BaseModel):
    description: Optional[str] = None
    messages: List[PromptMessage]


class ToolDefinition(BaseModel):
    name: str
    title: str
    description: str
    inputSchema: Dict[str, Any]


class ResourceDefinition(BaseModel):
    name: str
    title: str
    uri: str
    description: str
    mimeType: str = "application/json"


class PromptArgument(BaseModel):
    name: str
    description: str
    required: bool = False


class PromptDefinition(BaseModel):
    name: str
    title: str
    description: str
    arguments: List[PromptArgument] = []
