"""
Application service tying the refinement pipeline together.

`optimize` runs precondition checks, the retrying generation client and the
merge reconciler, then tries to attach a cover letter. Only the primary path
may raise (ValidationError or RefinementFailedError); cover letter and
persistence failures are logged and skipped.
"""
import logging
from typing import Optional

from .errors import ValidationError
from .generation import GenerationClient
from .interfaces import CoverLetterGenerator, ResumeExporter, ResumeRepository
from .merge import merge_optimized_data
from .models import OptimizedResume, ResumeData
from .preconditions import validate_export_preconditions
from .use_cases import ExportResumeUseCase, GenerateCoverLetterUseCase, OptimizeResumeUseCase

logger = logging.getLogger(__name__)


class ResumeService:
    def __init__(
        self,
        client: GenerationClient,
        cover_letter_generator: CoverLetterGenerator,
        exporter: Optional[ResumeExporter] = None,
        repository: Optional[ResumeRepository] = None,
    ):
        self.optimize_use_case = OptimizeResumeUseCase(client)
        self.cover_letter_use_case = GenerateCoverLetterUseCase(cover_letter_generator)
        self.exporter = exporter
        self.export_use_case = ExportResumeUseCase(exporter) if exporter is not None else None
        self.repository = repository

    async def optimize_resume(self, data: ResumeData) -> OptimizedResume:
        """Refined content for `data`, with a cover letter when one could be written."""
        optimized = await self.optimize_use_case.execute(data)
        try:
            cover_letter = await self.cover_letter_use_case.execute(data)
        except Exception as exc:
            logger.warning("Cover letter generation failed, continuing without it: %s", exc)
            return optimized
        return optimized.model_copy(update={"cover_letter": cover_letter})

    def merge_optimized_data(self, original: ResumeData, optimized: OptimizedResume) -> ResumeData:
        return merge_optimized_data(original, optimized)

    async def optimize(
        self, data: ResumeData, *, user_id: Optional[str] = None, title: Optional[str] = None
    ) -> ResumeData:
        optimized = await self.optimize_resume(data)
        merged = self.merge_optimized_data(data, optimized)
        if self.repository is not None and user_id:
            self._persist(user_id, merged, title)
        return merged

    def _persist(self, user_id: str, merged: ResumeData, title: Optional[str]) -> None:
        job = merged.target_job
        title = title or " @ ".join(p for p in [job.title, job.company] if p) or "Generated resume"
        try:
            resume_id = self.repository.save_generated_resume(user_id, merged, title)
        except Exception as exc:
            logger.warning("Saving generated resume failed: %s", exc)
            return
        logger.info("Saved generated resume %s for user %s", resume_id, user_id)

    def export_to_word(self, data: ResumeData, path) -> None:
        if self.export_use_case is None:
            raise RuntimeError("No resume exporter configured")
        self.export_use_case.execute(data, path)

    def export_cover_letter_to_word(self, data: ResumeData, path) -> None:
        if self.exporter is None:
            raise RuntimeError("No resume exporter configured")
        if not (data.cover_letter or "").strip():
            raise ValidationError("cover_letter", "Cover letter not available")
        validate_export_preconditions(data)
        self.exporter.export_cover_letter(data, path)
