"""
Availability answers for a single occurrence.

A player is available only when their entry is explicitly True. A missing
entry means "no answer yet" and is never treated as available.
"""

from typing import Dict, Optional, Protocol, Iterator, Tuple, runtime_checkable


@runtime_checkable
class AvailabilityProvider(Protocol):
    """Anything that can answer tri-state availability questions for one occurrence."""

    def has_entry(self, participant_id: str) -> bool:
        ...

    def is_available(self, participant_id: str) -> bool:
        ...

    def status_of(self, participant_id: str) -> Optional[bool]:
        ...


class AvailabilityRecord:
    """Dictionary-backed availability answers: player id -> True / False."""

    def __init__(self, entries: Optional[Dict[str, bool]] = None):
        self._entries: Dict[str, bool] = {}
        for participant_id, value in (entries or {}).items():
            self.set(participant_id, value)

    def set(self, participant_id: str, available: bool):
        if not isinstance(available, bool):
            raise TypeError(
                f"Availability for {participant_id} must be True or False (got {available!r})"
            )
        self._entries[participant_id] = available

    def clear(self, participant_id: str):
        self._entries.pop(participant_id, None)

    def has_entry(self, participant_id: str) -> bool:
        return participant_id in self._entries

    def is_available(self, participant_id: str) -> bool:
        return self._entries.get(participant_id) is True

    def status_of(self, participant_id: str) -> Optional[bool]:
        return self._entries.get(participant_id)

    def items(self) -> Iterator[Tuple[str, bool]]:
        return iter(self._entries.items())

    def to_dict(self) -> Dict[str, bool]:
        return dict(self._entries)

    def __len__(self):
        return len(self._entries)

    def __repr__(self):
        return f"AvailabilityRecord({self._entries!r})"
