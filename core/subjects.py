import logging

from config import DEFAULT_SUBJECT_COLOR
from core.exceptions import ValidationError
from core.models import Subject

logger = logging.getLogger(__name__)


def _clean_name(name):
    if not name or not str(name).strip():
        raise ValidationError("Subject name is required")
    return str(name).strip()


def add_subject(subjects, name, color=None):
    subject = Subject(
        id=max((s.id for s in subjects), default=0) + 1,
        name=_clean_name(name),
        color=color or DEFAULT_SUBJECT_COLOR,
    )
    logger.info("Added subject %s", subject.name)
    return list(subjects) + [subject]


def update_subject(subjects, subject_id, name=None, color=None):
    updated = []
    found = False

    for subject in subjects:
        if subject.id == subject_id:
            found = True
            subject = Subject(
                id=subject.id,
                name=_clean_name(name) if name is not None else subject.name,
                color=color or subject.color,
            )
        updated.append(subject)

    if not found:
        raise ValidationError(f"Subject {subject_id} does not exist")
    return updated


def delete_subject(subjects, slots, records, subject_id):
    """
    Removes a subject together with its timetable slots and
    attendance records. Returns (subjects, slots, records).
    """
    if not any(s.id == subject_id for s in subjects):
        raise ValidationError(f"Subject {subject_id} does not exist")

    subjects = [s for s in subjects if s.id != subject_id]
    kept_slots = [s for s in slots if s.subject_id != subject_id]
    kept_records = [r for r in records if r.subject_id != subject_id]

    logger.info(
        "Deleted subject %s with %d slot(s) and %d record(s)",
        subject_id, len(slots) - len(kept_slots), len(records) - len(kept_records),
    )
    return subjects, kept_slots, kept_records


def subject_by_id(subjects, subject_id):
    for subject in subjects:
        if subject.id == subject_id:
            return subject
    return None
