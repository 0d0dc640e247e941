from .errors import ValidationError
from .models import ResumeData, UserType


def _blank(value) -> bool:
    return not (value or "").strip()


def validate_preconditions(data: ResumeData) -> ResumeData:
    """Reject records that can't be refined, before any network call.

    Returns the record unchanged so callers can chain it.
    """
    if _blank(data.target_job.description):
        raise ValidationError("target_job.description", "Job description is required for optimization")

    if data.user_type is None:
        raise ValidationError("user_type", "User type must be selected")

    has_skills = len(data.skills) > 0
    if data.user_type == UserType.EXPERIENCED:
        if not data.experience and not has_skills:
            raise ValidationError("experience", "Please provide at least work experience or skills")
    else:
        if not data.education and not has_skills:
            raise ValidationError("education", "Please provide at least education or skills")

    return data


def validate_cover_letter_preconditions(data: ResumeData) -> ResumeData:
    if _blank(data.target_job.description):
        raise ValidationError(
            "target_job.description", "Job description is required for cover letter generation"
        )
    if _blank(data.personal_info.full_name):
        raise ValidationError(
            "personal_info.full_name", "Personal information is required for cover letter generation"
        )
    return data


def validate_export_preconditions(data: ResumeData) -> ResumeData:
    if _blank(data.personal_info.full_name):
        raise ValidationError("personal_info.full_name", "Personal information is required for export")
    return data
