"""Slot availability for donation appointments"""

from typing import Iterable, Sequence


def free_slots(all_slots: Sequence[str], booked_slots: Iterable[str]) -> list[str]:
    """
    Slots of the day that are still free, in the configured order.

    booked_slots is only used for membership, so its order and duplicates do
    not matter. An empty list means "no slots left" and is not an error.
    """
    booked = set(booked_slots)
    return [slot for slot in all_slots if slot not in booked]
