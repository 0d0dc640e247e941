from typing import Any, List, Optional, Protocol

from .models import GeneratedResumeSummary, ResumeData


class ResumeOptimizer(Protocol):
    async def optimize(self, data: ResumeData) -> Any:
        """Return an OptimizedResume, a mapping, or raw JSON text."""
        ...


class CoverLetterGenerator(Protocol):
    async def generate(self, data: ResumeData) -> str:
        ...


class ResumeExporter(Protocol):
    def export_resume(self, data: ResumeData, path) -> None:
        ...

    def export_cover_letter(self, data: ResumeData, path) -> None:
        ...


class ResumeRepository(Protocol):
    def save(self, data: ResumeData) -> None:
        ...

    def load(self) -> Optional[ResumeData]:
        ...

    def save_generated_resume(self, user_id: str, data: ResumeData, title: str) -> str:
        ...

    def update_generated_resume(self, resume_id: str, data: ResumeData, title: str) -> None:
        ...

    def get_generated_resumes(self, user_id: str) -> List[GeneratedResumeSummary]:
        ...

    def get_generated_resume(self, resume_id: str) -> Optional[ResumeData]:
        ...

    def delete_generated_resume(self, resume_id: str) -> None:
        ...
