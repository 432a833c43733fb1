# src/med_reminder/orch/utils/grouping.py

"""Merges matched schedule rows into one notification batch per user."""

from typing import Dict, Iterable

from med_reminder.orch.models import MedicationItem, MedicationSchedule, NotificationBatch


def group_by_user(records: Iterable[MedicationSchedule]) -> Dict[str, NotificationBatch]:
    """
    Keyed by ``user_id``, in first-seen order. Medications keep their input
    order within a batch. Users without a caretaker still get a batch; the
    dispatcher decides to skip it.
    """
    batches: Dict[str, NotificationBatch] = {}
    for record in records:
        batch = batches.get(record.user_id)
        if batch is None:
            batch = NotificationBatch(
                user_id=record.user_id,
                user_email=record.user_email,
                user_full_name=record.user_full_name,
                caretaker_email=record.caretaker_email,
            )
            batches[record.user_id] = batch
        batch.medications.append(
            MedicationItem(
                id=record.medication_id,
                name=record.medication_name,
                dosage=record.dosage,
                time=record.scheduled_time,
            )
        )
    return batches
