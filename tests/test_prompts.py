import json

from resume_refiner.prompts import (
    build_cover_letter_variables,
    build_optimize_variables,
    build_response_schema,
)


def test_schema_omits_empty_collections(experienced_resume):
    schema = build_response_schema(experienced_resume)
    assert set(schema["properties"]) == {"summary", "skills", "experience"}
    assert schema["required"] == ["summary", "skills", "experience"]
    assert schema["properties"]["experience"]["minItems"] == 2
    assert schema["properties"]["experience"]["maxItems"] == 2


def test_schema_for_student(student_resume):
    schema = build_response_schema(student_resume)
    assert "experience" not in schema["properties"]
    assert schema["properties"]["projects"]["minItems"] == 1
    assert "extracurriculars" in schema["required"]


def test_optimize_variables_carry_item_ids(experienced_resume):
    variables = build_optimize_variables(experienced_resume)
    experience = json.loads(variables["experience"])
    assert [e["id"] for e in experience] == ["a", "b"]
    assert experience[0]["description"] == "Built billing APIs"
    assert variables["projects"] == "None"
    assert variables["candidate_type"] == "Experienced Professional"
    assert json.loads(variables["schema"]) == build_response_schema(experienced_resume)


def test_cover_letter_variables(student_resume):
    variables = build_cover_letter_variables(student_resume)
    assert variables["full_name"] == "Sam Lee"
    assert variables["contact"] == "Not provided"
    assert "BSc in Statistics from State University" in variables["education"]
    assert variables["candidate_type"].startswith("Student")
