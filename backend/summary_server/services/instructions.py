import json
import logging
from typing import Optional

from summary_server.prompts.summary_instructions import (
    CODEBASE_INSPECTION_NOTES,
    DEFAULT_OUTPUT_LOCATION,
    GENERATION_PROCESS_NOTES,
    MARKDOWN_BULLET_POINTS,
    MARKDOWN_HEADINGS,
    MARKDOWN_TABLES,
    OUTPUT_FILE_FORMAT,
    OUTPUT_FILE_NAME,
    OUTPUT_REQUIREMENTS_NOTES,
    PROMPT_TEMPLATES,
    REQUIRED_FIELDS_FOR_USER_QUESTION,
    SUMMARY_FIELDS,
    SUMMARY_GOAL,
)
from summary_server.schemas.instructions import (
    FileFormat,
    FileFormatSpecifications,
    NotesForCursor,
    OutputFile,
    SummaryField,
    SystemSummaryInstructions,
)

logger = logging.getLogger(__name__)


def build_system_summary_instructions(output_directory: Optional[str] = None) -> SystemSummaryInstructions:
    """
    Assemble the system summary instruction document.

    Args:
        output_directory: Where the assistant should save codebase_summary.md.
            Taken as opaque text. Empty or missing falls back to "workspace root".

    Returns:
        A fresh, immutable SystemSummaryInstructions. Only output_file.location
        depends on the argument.
    """
    location = output_directory or DEFAULT_OUTPUT_LOCATION
    logger.debug("Building system summary instructions (location=%s)", location)

    return SystemSummaryInstructions(
        goal=SUMMARY_GOAL,
        fields_to_generate=[SummaryField(**field) for field in SUMMARY_FIELDS],
        required_fields_for_user_question=list(REQUIRED_FIELDS_FOR_USER_QUESTION),
        output_file=OutputFile(
            name=OUTPUT_FILE_NAME,
            format=OUTPUT_FILE_FORMAT,
            location=location,
        ),
        file_format=FileFormat(
            type=OUTPUT_FILE_FORMAT,
            specifications=FileFormatSpecifications(
                headings=list(MARKDOWN_HEADINGS),
                tables=list(MARKDOWN_TABLES),
                bullet_points=list(MARKDOWN_BULLET_POINTS),
            ),
        ),
        prompt_templates=dict(PROMPT_TEMPLATES),
        notes_for_cursor=NotesForCursor(
            codebase_inspection=list(CODEBASE_INSPECTION_NOTES),
            generation_process=list(GENERATION_PROCESS_NOTES),
            output_requirements=list(OUTPUT_REQUIREMENTS_NOTES),
        ),
    )


def render_instructions_json(instructions: SystemSummaryInstructions) -> str:
    """Serialize the document as two-space indented JSON, keeping field order."""
    return json.dumps(instructions.model_dump(exclude_none=True), indent=2, ensure_ascii=False)
