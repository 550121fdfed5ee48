import json
import pytest
from pydantic import ValidationError
from summary_server.services.instructions import (
    build_system_summary_instructions,
    render_instructions_json,
)

EXPECTED_FIELDS = ["overview", "status_summary", "flow_summary", "todo_list", "key_notes"]
REQUIRED_FIELDS = {"overview", "status_summary", "flow_summary", "key_notes"}


def test_build_is_deterministic():
    first = build_system_summary_instructions("./docs")
    second = build_system_summary_instructions("./docs")

    assert first == second
    assert first is not second
    assert render_instructions_json(first) == render_instructions_json(second)


def test_fields_order_and_required_flags():
    doc = build_system_summary_instructions()

    assert doc.field_names() == EXPECTED_FIELDS
    assert [f.required for f in doc.fields_to_generate] == [True, True, True, False, True]
    # Every field ships an example
    assert all(f.example_format for f in doc.fields_to_generate)


def test_required_fields_for_user_question():
    doc = build_system_summary_instructions()

    assert set(doc.required_fields_for_user_question) == REQUIRED_FIELDS
    assert len(doc.required_fields_for_user_question) == 4
    assert set(doc.required_fields_for_user_question) <= set(doc.field_names())
    required_in_fields = {f.name for f in doc.fields_to_generate if f.required}
    assert required_in_fields == REQUIRED_FIELDS


def test_prompt_templates_match_fields():
    doc = build_system_summary_instructions()
    assert sorted(doc.prompt_templates) == sorted(EXPECTED_FIELDS)


@pytest.mark.parametrize(
    "output_directory, expected",
    [
        ("./out", "./out"),
        (None, "workspace root"),
        ("", "workspace root"),
    ],
)
def test_output_location(output_directory, expected):
    doc = build_system_summary_instructions(output_directory)

    assert doc.output_file.location == expected
    assert doc.output_file.name == "codebase_summary.md"
    assert doc.output_file.format == "Markdown"


def test_only_location_varies():
    a = build_system_summary_instructions("./a").model_dump()
    b = build_system_summary_instructions("./b").model_dump()

    a.pop("output_file")
    b.pop("output_file")
    assert a == b


def test_document_is_immutable():
    doc = build_system_summary_instructions()
    with pytest.raises(ValidationError):
        doc.goal = "something else"


def test_render_json_layout():
    text = render_instructions_json(build_system_summary_instructions())
    data = json.loads(text)

    assert list(data) == [
        "goal",
        "fields_to_generate",
        "required_fields_for_user_question",
        "output_file",
        "file_format",
        "prompt_templates",
        "notes_for_cursor",
    ]
    assert text.startswith('{\n  "goal": ')
    assert data["file_format"]["type"] == "Markdown"
    assert len(data["file_format"]["specifications"]["headings"]) == 4
    assert data["notes_for_cursor"]["codebase_inspection"][0].startswith("BEFORE generating")
    assert data["notes_for_cursor"]["generation_process"][1].startswith("1. ")


def test_git_history_only_described_in_text():
    doc = build_system_summary_instructions()
    assert any("includeGitHistory" in step for step in doc.notes_for_cursor.codebase_inspection)
