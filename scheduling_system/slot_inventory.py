"""
Slot Inventory - Run-owned working copy of the slot pool

Groups are placed one after another and each placement withdraws its slot
before the next group is scored, so two groups can never land in the same
slot. The caller's TimeSlot objects are never touched.
"""

import copy


class SlotInventory:
    """Mutable pool of bookable slots for a single scheduling run."""

    def __init__(self, time_slots):
        self._slots = {}
        for slot in time_slots:
            if slot.id in self._slots:
                raise ValueError(f"Duplicate time slot id '{slot.id}'")
            if slot.capacity.max_students < 1:
                raise ValueError(f"Time slot '{slot.id}' has max_students < 1")
            if slot.capacity.available_spots < 0:
                raise ValueError(f"Time slot '{slot.id}' has negative available_spots")
            self._slots[slot.id] = copy.deepcopy(slot)

    def __len__(self):
        return len(self._slots)

    def get(self, slot_id):
        return self._slots[slot_id]

    def available_slots(self):
        """Slots still open for booking, in input order."""
        return [slot for slot in self._slots.values() if slot.is_available]

    def consume(self, slot_id, seats):
        """
        Book `seats` places in a slot and withdraw it from the pool.

        Returns:
            A snapshot copy of the booked slot (post-consumption state).

        Raises:
            ValueError: if the slot is unknown, already withdrawn or short of seats
        """
        if slot_id not in self._slots:
            raise ValueError(f"Unknown time slot '{slot_id}'")

        slot = self._slots[slot_id]
        if not slot.is_available:
            raise ValueError(f"Time slot '{slot_id}' has already been booked")
        if seats > slot.capacity.available_spots:
            raise ValueError(
                f"Time slot '{slot_id}' has {slot.capacity.available_spots} spots, cannot book {seats}"
            )

        slot.capacity.available_spots -= seats
        slot.is_available = False
        return copy.deepcopy(slot)
