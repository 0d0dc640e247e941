from .models import REFINABLE_COLLECTIONS, OptimizedResume, ResumeData


def _merge_collection(items, fragments):
    # merged list always follows the original items; unknown fragment ids are ignored
    if not items:
        return []
    by_id = {f.id: f for f in (fragments or [])}
    merged = []
    for item in items:
        fragment = by_id.get(item.id)
        if fragment is None:
            merged.append(item.model_copy(deep=True))
        else:
            merged.append(item.model_copy(update={"refined_bullets": list(fragment.refined_bullets)}, deep=True))
    return merged


def merge_optimized_data(original: ResumeData, optimized: OptimizedResume) -> ResumeData:
    """Fold a validated response back into a copy of the original record.

    Only summary, skills, cover letter and each item's refined bullets may
    change. Empty values in the response fall back to what was stored.
    """
    update = {
        "summary": optimized.summary or original.summary,
        "skills": list(optimized.skills or original.skills),
        "cover_letter": optimized.cover_letter or original.cover_letter,
    }
    for name in REFINABLE_COLLECTIONS:
        update[name] = _merge_collection(getattr(original, name), getattr(optimized, name))
    return original.model_copy(update=update, deep=True)
