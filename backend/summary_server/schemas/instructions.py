from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SummaryField(BaseModel):
    """
    One named section of the generated codebase_summary.md.
    """
    model_config = ConfigDict(frozen=True)

    # Section key (e.g. 'overview', 'status_summary')
    name: str = Field(..., description="Field name, also the key into prompt_templates")

    description: str = Field(..., description="What the section must cover")

    # Only todo_list is optional
    required: bool = Field(..., description="If True, the section must appear in the summary")

    prompt_template: str = Field(..., description="Inspection prompt for this section")

    example_format: Optional[str] = Field(None, description="Markdown sample of the finished section")


class OutputFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    format: str
    location: str


class FileFormatSpecifications(BaseModel):
    model_config = ConfigDict(frozen=True)

    headings: List[str]
    tables: List[str]
    bullet_points: List[str]


class FileFormat(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    specifications: FileFormatSpecifications


class NotesForCursor(BaseModel):
    """Ordered step lists for the assistant consuming the instructions."""
    model_config = ConfigDict(frozen=True)

    codebase_inspection: List[str]
    generation_process: List[str]
    output_requirements: List[str]


class SystemSummaryInstructions(BaseModel):
    """
    The complete instruction document returned by every MCP surface.
    Field order matches the serialized JSON.
    """
    model_config = ConfigDict(frozen=True)

    goal: str
    fields_to_generate: List[SummaryField]
    required_fields_for_user_question: List[str]
    output_file: OutputFile
    file_format: FileFormat
    prompt_templates: Dict[str, str]
    notes_for_cursor: NotesForCursor

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields_to_generate]
