from typing import Optional

from .config import RefinerSettings
from .generation import GenerationClient
from .llm import OpenAICoverLetterGenerator, OpenAIResumeOptimizer
from .render import DocxResumeExporter
from .repository import JsonFileResumeRepository
from .service import ResumeService


def create_resume_service(settings: Optional[RefinerSettings] = None) -> ResumeService:
    """Wire the OpenAI adapters, exporter and repository into a ResumeService."""
    settings = settings or RefinerSettings.from_env()
    if not settings.api_key:
        raise ValueError("OpenAI API key is required; set OPENAI_API_KEY")

    optimizer = OpenAIResumeOptimizer.from_settings(settings)
    client = GenerationClient.from_settings(optimizer, settings)
    return ResumeService(
        client,
        OpenAICoverLetterGenerator.from_settings(settings),
        exporter=DocxResumeExporter(),
        repository=JsonFileResumeRepository(settings.storage_dir),
    )
