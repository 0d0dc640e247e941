from .errors import CoverLetterError
from .generation import GenerationClient
from .interfaces import CoverLetterGenerator, ResumeExporter
from .models import OptimizedResume, ResumeData
from .preconditions import (
    validate_cover_letter_preconditions,
    validate_export_preconditions,
    validate_preconditions,
)


class OptimizeResumeUseCase:
    def __init__(self, client: GenerationClient):
        self.client = client

    async def execute(self, data: ResumeData) -> OptimizedResume:
        # fail fast here; the client re-checks before each attempt
        validate_preconditions(data)
        return await self.client.refine(data)


class GenerateCoverLetterUseCase:
    def __init__(self, generator: CoverLetterGenerator):
        self.generator = generator

    async def execute(self, data: ResumeData) -> str:
        validate_cover_letter_preconditions(data)
        letter = await self.generator.generate(data)
        letter = (letter or "").strip()
        if not letter:
            raise CoverLetterError("No response from AI")
        return letter


class ExportResumeUseCase:
    def __init__(self, exporter: ResumeExporter):
        self.exporter = exporter

    def execute(self, data: ResumeData, path) -> None:
        validate_export_preconditions(data)
        self.exporter.export_resume(data, path)
