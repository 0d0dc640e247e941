import pytest

from resume_refiner.models import (
    Education,
    Extracurricular,
    PersonalInfo,
    Project,
    ResumeData,
    TargetJob,
    UserType,
    WorkExperience,
)


class FakeOptimizer:
    """Replays a scripted list of outcomes; exceptions are raised, anything else returned."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    async def optimize(self, data):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeCoverLetterGenerator:
    def __init__(self, letter="Dear Hiring Manager,\n\nI am excited to apply.", error=None):
        self.letter = letter
        self.error = error
        self.calls = 0

    async def generate(self, data):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.letter


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def experienced_resume():
    return ResumeData(
        user_type=UserType.EXPERIENCED,
        target_job=TargetJob(title="Backend Engineer", company="Acme", description="Python, AWS, Postgres"),
        personal_info=PersonalInfo(full_name="Jane Doe", email="jane@example.com"),
        experience=[
            WorkExperience(id="a", company="Initech", role="Engineer", start_date="2020-01",
                           end_date="2022-06", raw_description="Built billing APIs"),
            WorkExperience(id="b", company="Globex", role="Senior Engineer", start_date="2022-07",
                           is_current=True, raw_description="Led the data platform team"),
        ],
        skills=["Python", "SQL"],
    )


@pytest.fixture
def student_resume():
    return ResumeData(
        user_type=UserType.STUDENT,
        target_job=TargetJob(title="Data Intern", company="Acme", description="Pandas and statistics"),
        personal_info=PersonalInfo(full_name="Sam Lee"),
        education=[Education(id="e1", school="State University", degree="BSc", field="Statistics")],
        projects=[Project(id="p1", name="Churn model", raw_description="Predicted churn", technologies="pandas")],
        extracurriculars=[Extracurricular(id="x1", title="Treasurer", organization="Data Club",
                                          description="Managed the club budget")],
    )


def optimized_payload(summary="Tailored summary", skills=("Python", "AWS"), **collections):
    payload = {"summary": summary, "skills": list(skills)}
    for name, fragments in collections.items():
        payload[name] = [{"id": i, "refined_bullets": list(b)} for i, b in fragments]
    return payload
