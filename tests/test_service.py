import pytest
from docx import Document

from conftest import FakeCoverLetterGenerator, FakeOptimizer, RecordingSleep, optimized_payload
from resume_refiner.errors import CoverLetterError, RefinementFailedError, TransportError, ValidationError
from resume_refiner.generation import GenerationClient
from resume_refiner.merge import merge_optimized_data
from resume_refiner.models import OptimizedResume
from resume_refiner.render import DocxResumeExporter
from resume_refiner.repository import JsonFileResumeRepository
from resume_refiner.service import ResumeService


def _service(optimizer, letters=None, **kwargs):
    client = GenerationClient(optimizer, sleep=RecordingSleep())
    return ResumeService(client, letters or FakeCoverLetterGenerator(), **kwargs)


def _good():
    return optimized_payload(experience=[("b", ["B1"]), ("a", ["A1", "A2"])])


@pytest.mark.asyncio
async def test_two_positions_no_projects(experienced_resume):
    service = _service(FakeOptimizer([_good()]))
    merged = await service.optimize(experienced_resume)

    assert [e.id for e in merged.experience] == ["a", "b"]
    assert merged.experience[0].refined_bullets == ["A1", "A2"]
    assert merged.experience[1].refined_bullets == ["B1"]
    assert merged.projects == []
    assert merged.summary == "Tailored summary"
    assert merged.cover_letter.startswith("Dear Hiring Manager")


@pytest.mark.asyncio
async def test_cover_letter_failure_does_not_fail_optimize(experienced_resume):
    letters = FakeCoverLetterGenerator(error=CoverLetterError("quota"))
    service = _service(FakeOptimizer([_good()]), letters)
    merged = await service.optimize(experienced_resume)

    expected = merge_optimized_data(experienced_resume, OptimizedResume.model_validate(_good()))
    assert merged == expected
    assert merged.cover_letter is None
    assert letters.calls == 1


@pytest.mark.asyncio
async def test_cover_letter_precondition_failure_is_absorbed(experienced_resume):
    experienced_resume.personal_info.full_name = ""
    letters = FakeCoverLetterGenerator()
    merged = await _service(FakeOptimizer([_good()]), letters).optimize(experienced_resume)
    assert merged.cover_letter is None
    assert letters.calls == 0


@pytest.mark.asyncio
async def test_blank_cover_letter_is_dropped(experienced_resume):
    letters = FakeCoverLetterGenerator(letter="   ")
    optimized = await _service(FakeOptimizer([_good()]), letters).optimize_resume(experienced_resume)
    assert optimized.cover_letter is None


@pytest.mark.asyncio
async def test_validation_error_makes_no_calls(experienced_resume):
    experienced_resume.target_job.description = ""
    optimizer = FakeOptimizer([])
    letters = FakeCoverLetterGenerator()
    with pytest.raises(ValidationError):
        await _service(optimizer, letters).optimize(experienced_resume)
    assert optimizer.calls == 0
    assert letters.calls == 0


@pytest.mark.asyncio
async def test_exhausted_retries_propagate(experienced_resume):
    optimizer = FakeOptimizer([TransportError("down")] * 3)
    letters = FakeCoverLetterGenerator()
    with pytest.raises(RefinementFailedError) as exc:
        await _service(optimizer, letters).optimize(experienced_resume)
    assert exc.value.attempts == 3
    assert letters.calls == 0


@pytest.mark.asyncio
async def test_optimize_does_not_mutate_input(experienced_resume):
    snapshot = experienced_resume.model_dump()
    await _service(FakeOptimizer([_good()])).optimize(experienced_resume)
    assert experienced_resume.model_dump() == snapshot


@pytest.mark.asyncio
async def test_successful_result_is_persisted(experienced_resume, tmp_path):
    repo = JsonFileResumeRepository(tmp_path)
    service = _service(FakeOptimizer([_good()]), repository=repo)
    merged = await service.optimize(experienced_resume, user_id="user-1")

    saved = repo.get_generated_resumes("user-1")
    assert len(saved) == 1
    assert saved[0].title == "Backend Engineer @ Acme"
    assert saved[0].company == "Acme"
    assert repo.get_generated_resume(saved[0].id) == merged


@pytest.mark.asyncio
async def test_user_id_and_title_are_keyword_only(experienced_resume, tmp_path):
    repo = JsonFileResumeRepository(tmp_path)
    service = _service(FakeOptimizer([_good()]), repository=repo)
    with pytest.raises(TypeError):
        await service.optimize(experienced_resume, "user-1", "Custom")
    await service.optimize(experienced_resume, user_id="user-1", title="Custom")
    assert [s.title for s in repo.get_generated_resumes("user-1")] == ["Custom"]


@pytest.mark.asyncio
async def test_failed_cover_letter_keeps_previous_letter(experienced_resume):
    experienced_resume.cover_letter = "Dear Team,\n\nAn earlier letter."
    letters = FakeCoverLetterGenerator(error=CoverLetterError("quota"))
    merged = await _service(FakeOptimizer([_good()]), letters).optimize(experienced_resume)
    assert merged.cover_letter == "Dear Team,\n\nAn earlier letter."


class BrokenRepository:
    def save_generated_resume(self, user_id, data, title):
        raise OSError("disk full")


@pytest.mark.asyncio
async def test_persistence_failure_is_absorbed(experienced_resume):
    service = _service(FakeOptimizer([_good()]), repository=BrokenRepository())
    merged = await service.optimize(experienced_resume, user_id="user-1")
    assert merged.experience[0].refined_bullets == ["A1", "A2"]


def test_export_to_word(experienced_resume, tmp_path):
    service = _service(FakeOptimizer([]), exporter=DocxResumeExporter())
    path = tmp_path / "resume.docx"
    service.export_to_word(experienced_resume, path)
    assert path.exists()


def test_export_requires_name(experienced_resume, tmp_path):
    experienced_resume.personal_info.full_name = ""
    service = _service(FakeOptimizer([]), exporter=DocxResumeExporter())
    with pytest.raises(ValidationError):
        service.export_to_word(experienced_resume, tmp_path / "resume.docx")


def test_export_cover_letter(experienced_resume, tmp_path):
    service = _service(FakeOptimizer([]), exporter=DocxResumeExporter())
    path = tmp_path / "letter.docx"
    with pytest.raises(ValidationError):
        service.export_cover_letter_to_word(experienced_resume, path)

    experienced_resume.cover_letter = "Dear Hiring Manager,\n\nHello."
    service.export_cover_letter_to_word(experienced_resume, path)
    texts = [p.text for p in Document(str(path)).paragraphs]
    assert "Hello." in texts


def test_export_without_exporter_raises(experienced_resume, tmp_path):
    with pytest.raises(RuntimeError):
        _service(FakeOptimizer([])).export_to_word(experienced_resume, tmp_path / "x.docx")
