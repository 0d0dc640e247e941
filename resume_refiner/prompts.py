import json
from typing import Dict

from .models import REFINABLE_COLLECTIONS, ResumeData, UserType

SYSTEM_BASE = """You are a strict, detail-oriented professional resume writer
specializing in Applicant Tracking Systems (ATS). Never fabricate
experience, employers, dates, or certifications. Preserve factual accuracy
and prioritize strong, specific impact statements that match the Job
Description and the candidate's career level.
"""

OPTIMIZE_PROMPT = """YOUR TASK: Optimize the candidate's profile to match the Target Job Description.

CANDIDATE TYPE: {candidate_type}

TARGET JOB PROFILE:
Title: {job_title}
Company: {job_company}
Description: {job_description}

CANDIDATE PROFILE:
Experience: {experience}
Projects: {projects}
Activities: {extracurriculars}
Education: {education}
Skills (Candidate's Input): {skills}

OPTIMIZATION INSTRUCTIONS:
1. SUMMARY: a 3-4 sentence professional summary that integrates high-value
   keywords from the Job Description. {summary_focus}
2. SKILLS: extract and refine the most relevant skills, prioritizing hard
   skills and tools mentioned in the Job Description.
3. BULLETS: for every Experience, Project and Activity item above, rewrite its
   description into 3-5 high-impact bullets following "Action Verb + Task +
   Result". Quantify results where possible. Weave in JD keywords naturally.
   - Return exactly one entry per input item, reusing the item's "id" verbatim.
   - Never add entries for items that were not provided.
   - Every entry must contain at least one bullet.
4. FORMAT: return strict JSON only (no markdown, no code fences) matching this
   JSON schema:
{schema}
"""

COVER_LETTER_SYSTEM = """You are an expert cover letter writer specializing in compelling,
personalized cover letters that get candidates noticed by recruiters and
hiring managers."""

COVER_LETTER_PROMPT = """Write a professional, compelling cover letter for the following job application.

JOB DETAILS:
Position: {job_title}
Company: {job_company}
Job Description: {job_description}

CANDIDATE INFORMATION:
Name: {full_name}
Contact: {contact}

CANDIDATE PROFILE:
Type: {candidate_type}
Professional Summary: {summary}
Work Experience:
{experience}
Education:
{education}
Key Skills: {skills}

REQUIREMENTS:
- Professional business letter format: date, "Hiring Manager" salutation, 3-4 paragraphs, closing and signature line.
- {body_focus}
- Naturally incorporate keywords from the job description. One page maximum.
Return only the letter text.
"""

_BULLETS_SCHEMA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "id": {"type": "string"},
            "refined_bullets": {
                "type": "array",
                "items": {"type": "string"},
                "minItems": 1,
            },
        },
        "required": ["id", "refined_bullets"],
    },
}


def build_response_schema(data: ResumeData) -> Dict:
    """JSON schema for the expected response.

    A collection with zero input items is left out of the schema entirely
    rather than being required-empty.
    """
    properties = {
        "summary": {"type": "string"},
        "skills": {"type": "array", "items": {"type": "string"}},
    }
    required = ["summary", "skills"]
    for name in REFINABLE_COLLECTIONS:
        items = getattr(data, name)
        if not items:
            continue
        schema = dict(_BULLETS_SCHEMA)
        schema["minItems"] = len(items)
        schema["maxItems"] = len(items)
        properties[name] = schema
        required.append(name)
    return {"type": "object", "properties": properties, "required": required}


def _is_student(data: ResumeData) -> bool:
    return data.user_type == UserType.STUDENT


def _dump(payload) -> str:
    return json.dumps(payload, ensure_ascii=False)


def build_optimize_variables(data: ResumeData) -> Dict[str, str]:
    student = _is_student(data)
    experience = [
        {"id": e.id, "role": e.role, "company": e.company, "description": e.raw_description}
        for e in data.experience
    ]
    projects = [
        {"id": p.id, "name": p.name, "technologies": p.technologies, "description": p.raw_description}
        for p in data.projects
    ]
    extras = [
        {"id": x.id, "title": x.title, "organization": x.organization, "description": x.description}
        for x in data.extracurriculars
    ]
    education = [e.model_dump(exclude={"id"}) for e in data.education]
    if student:
        summary_focus = (
            "Emphasize academic achievements, projects, internships and activities; "
            "highlight transferable skills and potential value to the employer."
        )
    else:
        summary_focus = "Frame the candidate's background as the solution to the needs stated in the JD."
    return {
        "candidate_type": "Student/Entry-level" if student else "Experienced Professional",
        "job_title": data.target_job.title,
        "job_company": data.target_job.company,
        "job_description": data.target_job.description,
        "experience": _dump(experience) if experience else "None",
        "projects": _dump(projects) if projects else "None",
        "extracurriculars": _dump(extras) if extras else "None",
        "education": _dump(education) if education else "Not provided",
        "skills": ", ".join(data.skills),
        "summary_focus": summary_focus,
        "schema": json.dumps(build_response_schema(data), indent=2),
    }


def build_cover_letter_variables(data: ResumeData) -> Dict[str, str]:
    student = _is_student(data)
    info = data.personal_info
    contact = " | ".join(
        part for part in [info.email, info.phone, info.location, info.linkedin] if part
    )
    experience = "\n".join(
        f"- {e.role} at {e.company} ({e.start_date} - {'Present' if e.is_current else e.end_date})"
        for e in data.experience
    )
    education = "\n".join(
        f"- {e.degree}{' in ' + e.field if e.field else ''} from {e.school} ({e.start_date} - {e.end_date})"
        for e in data.education
    )
    if student:
        body_focus = (
            "Highlight relevant coursework, projects, internships and activities; "
            "show eagerness to learn and connect academic experience to the job."
        )
    else:
        body_focus = (
            "Highlight the most relevant experience and quantified achievements; "
            "connect them directly to the job requirements."
        )
    return {
        "job_title": data.target_job.title,
        "job_company": data.target_job.company,
        "job_description": data.target_job.description,
        "full_name": info.full_name,
        "contact": contact or "Not provided",
        "candidate_type": "Student/Entry-level candidate" if student else "Experienced professional",
        "summary": data.summary or "Not provided",
        "experience": experience or "None",
        "education": education or "Not provided",
        "skills": ", ".join(data.skills),
        "body_focus": body_focus,
    }
