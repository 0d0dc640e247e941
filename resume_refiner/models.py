from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class UserType(str, Enum):
    EXPERIENCED = "experienced"
    STUDENT = "student"


class PersonalInfo(BaseModel):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""
    website: str = ""


class TargetJob(BaseModel):
    title: str = ""
    company: str = ""
    description: str = ""


class WorkExperience(BaseModel):
    id: str
    company: str = ""
    role: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    raw_description: str = ""
    refined_bullets: List[str] = Field(default_factory=list)


class Project(BaseModel):
    id: str
    name: str = ""
    raw_description: str = ""
    technologies: str = ""
    link: str = ""
    refined_bullets: List[str] = Field(default_factory=list)


class Extracurricular(BaseModel):
    id: str
    title: str = ""
    organization: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    refined_bullets: List[str] = Field(default_factory=list)


class Education(BaseModel):
    id: str
    school: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""


class Award(BaseModel):
    id: str
    title: str = ""
    issuer: str = ""
    date: str = ""
    description: str = ""


class Certification(BaseModel):
    id: str
    name: str = ""
    issuer: str = ""
    date: str = ""
    link: str = ""


class ResumeData(BaseModel):
    """The full user-authored resume passing through the pipeline."""

    user_type: Optional[UserType] = None
    target_job: TargetJob = Field(default_factory=TargetJob)
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    summary: str = ""
    experience: List[WorkExperience] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    extracurriculars: List[Extracurricular] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    skills: List[str] = Field(default_factory=list)
    awards: List[Award] = Field(default_factory=list)
    certifications: List[Certification] = Field(default_factory=list)
    cover_letter: Optional[str] = None


class RefinedFragment(BaseModel):
    id: str
    refined_bullets: List[str] = Field(default_factory=list)


class OptimizedResume(BaseModel):
    """Structured output expected back from the generation service.

    `summary` and `skills` have no defaults so that a payload missing either
    field fails to parse. Fragment lists stay `None` when the model omitted
    them, which is only legal for collections that were empty on input.
    """

    summary: str
    skills: List[str]
    experience: Optional[List[RefinedFragment]] = None
    projects: Optional[List[RefinedFragment]] = None
    extracurriculars: Optional[List[RefinedFragment]] = None
    cover_letter: Optional[str] = None


# Reconcilable collections, in the order they are validated and merged.
REFINABLE_COLLECTIONS = ("experience", "projects", "extracurriculars")


class GeneratedResumeSummary(BaseModel):
    id: str
    title: str
    date: str
    company: str = ""
