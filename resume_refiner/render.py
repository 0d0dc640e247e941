import logging
import re
from datetime import date

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt

from .models import ResumeData

logger = logging.getLogger(__name__)

FONT_NAME = "Cambria"
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")


def _split_bold(text: str):
    """Split Markdown-style **bold** spans into (segment, bold) pairs."""
    parts = []
    pos = 0
    for m in _BOLD_RE.finditer(text):
        if m.start() > pos:
            parts.append((text[pos:m.start()], False))
        parts.append((m.group(1), True))
        pos = m.end()
    if pos < len(text):
        parts.append((text[pos:], False))
    return parts


def _add_runs(paragraph, text: str, *, font_size: int = 11, bold: bool = False, italic: bool = False):
    if not text:
        return
    for seg, seg_bold in _split_bold(text):
        run = paragraph.add_run(seg)
        run.font.name = FONT_NAME
        run.font.size = Pt(font_size)
        run.bold = bool(seg_bold or bold)
        if italic:
            run.italic = True


def _apply_bullet_orphan_control(text: str, *, tail_words: int = 3) -> str:
    """Join the last few words with NBSP so Word doesn't wrap a single word."""
    if not text or "\n" in text or len(text) < 45:
        return text
    parts = text.rsplit(" ", tail_words - 1)
    if len(parts) != tail_words:
        return text
    head = parts[0].rstrip()
    tail = "\u00A0".join(p.strip() for p in parts[1:])
    if not head or not tail:
        return text
    return head + " " + tail


def _tight(p, before=0, after=0):
    p.paragraph_format.space_before = Pt(before)
    p.paragraph_format.space_after = Pt(after)


def _add_hyperlink(paragraph, text, url):
    part = paragraph.part
    r_id = part.relate_to(url, 'http://schemas.openxmlformats.org/officeDocument/2006/relationships/hyperlink', is_external=True)

    hyperlink = OxmlElement('w:hyperlink')
    hyperlink.set(qn('r:id'), r_id)

    new_run = OxmlElement('w:r')
    rPr = OxmlElement('w:rPr')
    rStyle = OxmlElement('w:rStyle')
    rStyle.set(qn('w:val'), 'Hyperlink')
    rPr.append(rStyle)
    new_run.append(rPr)
    new_run.append(OxmlElement('w:t'))
    new_run.find(qn('w:t')).text = text
    hyperlink.append(new_run)
    paragraph._p.append(hyperlink)


def _absolute(url: str) -> str:
    url = url.strip()
    if url.startswith("http://") or url.startswith("https://"):
        return url
    return "https://" + url


def _date_range(start: str, end: str) -> str:
    if start and end:
        return f"{start} – {end}"
    return start or end


def _new_document():
    doc = Document()
    for sec in doc.sections:
        sec.top_margin = Inches(0.5)
        sec.bottom_margin = Inches(0.5)
        sec.left_margin = Inches(0.5)
        sec.right_margin = Inches(0.5)
    return doc


def _heading(doc, title: str):
    p = doc.add_paragraph()
    _tight(p, before=6, after=2)
    _add_runs(p, title.upper(), bold=True)
    p.runs[0].underline = True


def _entry_header(doc, left: str, right: str = "", *, first: bool = False):
    p = doc.add_paragraph()
    _tight(p, before=0 if first else 3)
    _add_runs(p, left, bold=True)
    if right:
        _add_runs(p, " | " + right)


def _bullet(doc, text: str):
    p = doc.add_paragraph()
    _tight(p)
    p.paragraph_format.left_indent = Pt(18)
    _add_runs(p, "• ")
    _add_runs(p, _apply_bullet_orphan_control(text))


def _bullets(doc, refined, fallback: str):
    # refined bullets win; otherwise the user's raw text is never dropped
    if refined:
        for b in refined:
            _bullet(doc, b)
    elif fallback:
        _bullet(doc, fallback)


def _render_header(doc, data: ResumeData):
    info = data.personal_info
    if info.full_name:
        p = doc.add_paragraph()
        _tight(p)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER
        _add_runs(p, info.full_name, font_size=20, bold=True)

    parts = [x for x in [info.email, info.phone, info.location] if x]
    links = [(label, url) for label, url in [
        ("LinkedIn", info.linkedin), ("GitHub", info.github), ("Website", info.website)
    ] if url]
    if not parts and not links:
        return
    p = doc.add_paragraph()
    _tight(p, after=4)
    p.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add_runs(p, " | ".join(parts))
    for idx, (label, url) in enumerate(links):
        if parts or idx > 0:
            _add_runs(p, " | ")
        _add_hyperlink(p, label, _absolute(url))


def build_resume_document(data: ResumeData):
    doc = _new_document()
    _render_header(doc, data)

    if data.summary:
        _heading(doc, "Professional Summary")
        p = doc.add_paragraph()
        _tight(p)
        _add_runs(p, data.summary)

    if data.experience:
        _heading(doc, "Experience")
        for idx, exp in enumerate(data.experience):
            end = "Present" if exp.is_current else exp.end_date
            _entry_header(doc, exp.role, _date_range(exp.start_date, end), first=idx == 0)
            if exp.company:
                p = doc.add_paragraph()
                _tight(p)
                _add_runs(p, exp.company, italic=True)
            _bullets(doc, exp.refined_bullets, exp.raw_description)

    if data.projects:
        _heading(doc, "Projects")
        for idx, proj in enumerate(data.projects):
            _entry_header(doc, proj.name, proj.technologies, first=idx == 0)
            if proj.link:
                p = doc.add_paragraph()
                _tight(p)
                _add_hyperlink(p, proj.link, _absolute(proj.link))
            _bullets(doc, proj.refined_bullets, proj.raw_description)

    if data.extracurriculars:
        _heading(doc, "Extracurricular Activities")
        for idx, extra in enumerate(data.extracurriculars):
            _entry_header(doc, extra.title, _date_range(extra.start_date, extra.end_date), first=idx == 0)
            if extra.organization:
                p = doc.add_paragraph()
                _tight(p)
                _add_runs(p, extra.organization, italic=True)
            _bullets(doc, extra.refined_bullets, extra.description)

    if data.education:
        _heading(doc, "Education")
        for idx, edu in enumerate(data.education):
            _entry_header(doc, edu.school, _date_range(edu.start_date, edu.end_date), first=idx == 0)
            degree = edu.degree + (f" in {edu.field}" if edu.field else "")
            if edu.gpa:
                degree += f" • GPA: {edu.gpa}"
            p = doc.add_paragraph()
            _tight(p)
            _add_runs(p, degree)

    if data.skills:
        _heading(doc, "Skills")
        p = doc.add_paragraph()
        _tight(p)
        _add_runs(p, ", ".join(data.skills))

    if data.certifications:
        _heading(doc, "Certifications")
        for cert in data.certifications:
            _entry_header(doc, cert.name, " | ".join(x for x in [cert.issuer, cert.date] if x), first=True)

    if data.awards:
        _heading(doc, "Awards & Honors")
        for award in data.awards:
            _entry_header(doc, award.title, " | ".join(x for x in [award.issuer, award.date] if x), first=True)
            if award.description:
                p = doc.add_paragraph()
                _tight(p)
                _add_runs(p, award.description)

    return doc


def build_cover_letter_document(data: ResumeData):
    doc = _new_document()
    _render_header(doc, data)
    letter = (data.cover_letter or "").strip()
    if not re.search(r"\b(19|20)\d{2}\b", letter.split("\n\n", 1)[0]):
        p = doc.add_paragraph()
        _tight(p, after=8)
        _add_runs(p, date.today().strftime("%B %d, %Y"))
    for block in re.split(r"\n\s*\n", letter):
        block = block.strip()
        if not block:
            continue
        p = doc.add_paragraph()
        _tight(p, after=8)
        _add_runs(p, block)
    return doc


class DocxResumeExporter:
    """ResumeExporter that writes .docx files with python-docx."""

    def export_resume(self, data: ResumeData, path) -> None:
        build_resume_document(data).save(str(path))
        logger.info("Wrote resume to %s", path)

    def export_cover_letter(self, data: ResumeData, path) -> None:
        build_cover_letter_document(data).save(str(path))
        logger.info("Wrote cover letter to %s", path)
