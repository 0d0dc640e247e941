import json
import logging
import os
import tempfile
import uuid
from datetime import datetime, timezone
from typing import List, Optional

import pydantic

from .errors import RepositoryError
from .models import GeneratedResumeSummary, ResumeData

logger = logging.getLogger(__name__)

DRAFT_FILENAME = "resume_draft.json"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _write_json(path: str, payload) -> None:
    directory = os.path.dirname(path)
    os.makedirs(directory, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=directory, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


class JsonFileResumeRepository:
    """Stores the working draft and generated resume snapshots as JSON files.

    Layout under `root`::

        resume_draft.json
        generated/<id>.json   {"id", "user_id", "title", "created_at", "updated_at", "data"}
    """

    def __init__(self, root: str):
        self.root = str(root)
        self.generated_dir = os.path.join(self.root, "generated")

    def _draft_path(self) -> str:
        return os.path.join(self.root, DRAFT_FILENAME)

    def _generated_path(self, resume_id: str) -> str:
        # ids are opaque but must not escape the storage directory
        if not resume_id or os.path.basename(resume_id) != resume_id:
            raise RepositoryError(f"Invalid generated resume id: {resume_id!r}")
        return os.path.join(self.generated_dir, resume_id + ".json")

    # Drafts are best effort; a broken draft is reported and dropped.
    def save(self, data: ResumeData) -> None:
        try:
            _write_json(self._draft_path(), data.model_dump(mode="json"))
        except OSError as exc:
            logger.warning("Failed to save draft: %s", exc)

    def load(self) -> Optional[ResumeData]:
        path = self._draft_path()
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return ResumeData.model_validate(json.load(f))
        except (OSError, ValueError, pydantic.ValidationError) as exc:
            logger.warning("Failed to load draft: %s", exc)
            return None

    def _read_generated(self, resume_id: str) -> Optional[dict]:
        path = self._generated_path(resume_id)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            raise RepositoryError(f"Failed to read generated resume {resume_id}: {exc}") from exc

    def save_generated_resume(self, user_id: str, data: ResumeData, title: str) -> str:
        resume_id = uuid.uuid4().hex
        now = _now()
        record = {
            "id": resume_id,
            "user_id": user_id,
            "title": title,
            "created_at": now,
            "updated_at": now,
            "data": data.model_dump(mode="json"),
        }
        try:
            _write_json(self._generated_path(resume_id), record)
        except OSError as exc:
            raise RepositoryError(f"Failed to save generated resume: {exc}") from exc
        return resume_id

    def update_generated_resume(self, resume_id: str, data: ResumeData, title: str) -> None:
        record = self._read_generated(resume_id)
        if record is None:
            raise RepositoryError(f"Generated resume {resume_id} not found")
        record.update({"title": title, "data": data.model_dump(mode="json"), "updated_at": _now()})
        try:
            _write_json(self._generated_path(resume_id), record)
        except OSError as exc:
            raise RepositoryError(f"Failed to update generated resume {resume_id}: {exc}") from exc

    def get_generated_resumes(self, user_id: str) -> List[GeneratedResumeSummary]:
        if not os.path.isdir(self.generated_dir):
            return []
        out = []
        for name in os.listdir(self.generated_dir):
            if not name.endswith(".json"):
                continue
            resume_id = name[:-len(".json")]
            try:
                record = self._read_generated(resume_id)
            except RepositoryError as exc:
                # one broken snapshot must not hide the others
                logger.warning("Skipping generated resume: %s", exc)
                continue
            if not isinstance(record, dict) or record.get("user_id") != user_id:
                continue
            company = ((record.get("data") or {}).get("target_job") or {}).get("company") or ""
            out.append(GeneratedResumeSummary(
                id=record.get("id") or resume_id,
                title=record.get("title", ""),
                date=record.get("created_at", ""),
                company=company,
            ))
        # newest first
        out.sort(key=lambda s: s.date, reverse=True)
        return out

    def get_generated_resume(self, resume_id: str) -> Optional[ResumeData]:
        record = self._read_generated(resume_id)
        if record is None:
            return None
        try:
            return ResumeData.model_validate(record.get("data") or {})
        except pydantic.ValidationError as exc:
            raise RepositoryError(f"Generated resume {resume_id} is corrupt: {exc}") from exc

    def delete_generated_resume(self, resume_id: str) -> None:
        path = self._generated_path(resume_id)
        try:
            os.remove(path)
        except FileNotFoundError as exc:
            raise RepositoryError(f"Generated resume {resume_id} not found") from exc
        except OSError as exc:
            raise RepositoryError(f"Failed to delete generated resume {resume_id}: {exc}") from exc
