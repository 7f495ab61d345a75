"""Audit trail of the steps taken while locating and checking licenses."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import Iterator, Optional

UNDEFINED_REFERENCE = "UNDEF"
MAX_REFERENCE_LENGTH = 4096
MAX_INFO_LENGTH = 255


class EventType(enum.Enum):
    """Everything that can happen to a license while it is being checked."""

    LICENSE_OK = enum.auto()
    LICENSE_FILE_NOT_FOUND = enum.auto()
    LICENSE_SERVER_NOT_FOUND = enum.auto()
    ENVIRONMENT_VARIABLE_NOT_DEFINED = enum.auto()
    FILE_FORMAT_NOT_RECOGNIZED = enum.auto()
    LICENSE_MALFORMED = enum.auto()
    PRODUCT_NOT_LICENSED = enum.auto()
    PRODUCT_EXPIRED = enum.auto()
    LICENSE_CORRUPTED = enum.auto()
    IDENTIFIERS_MISMATCH = enum.auto()
    LICENSE_SPECIFIED = enum.auto()
    LICENSE_FOUND = enum.auto()
    PRODUCT_FOUND = enum.auto()
    SIGNATURE_VERIFIED = enum.auto()


class Severity(enum.Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


# How far along the validation a successful event shows a license to be.
_PROGRESS = {
    EventType.LICENSE_SPECIFIED: 0,
    EventType.LICENSE_FOUND: 1,
    EventType.PRODUCT_FOUND: 2,
    EventType.SIGNATURE_VERIFIED: 3,
    EventType.LICENSE_OK: 4,
}


@dataclass
class AuditEvent:
    """One recorded step, tied to the license it concerns."""

    event_type: EventType
    severity: Severity
    license_reference: str = UNDEFINED_REFERENCE
    info: str = ""


class EventRegistry:
    """Records events and explains why licenses failed to verify.

    For every license it remembers the event that took that license furthest
    through validation, so that failures of the most promising licenses are
    reported first.
    """

    def __init__(self) -> None:
        self._events: list[AuditEvent] = []
        self._most_advanced: dict[str, int] = {}
        self._step = -1

    @property
    def validation_step(self) -> int:
        """The furthest validation step any license has reached, or -1."""
        return self._step

    def __iter__(self) -> Iterator[AuditEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __str__(self) -> str:
        entries = "".join(
            f"[ev:{event.event_type.name},sev:{event.severity.name}ref:{event.license_reference}]"
            for event in self._events
        )
        return f"EventReg[step:{self._step},events:{{{entries}]"

    def add_event(
        self,
        event: EventType,
        license_reference: Optional[str] = None,
        info: Optional[str] = None,
    ) -> AuditEvent:
        """Record an event; success events are info, all others warnings."""
        step = _PROGRESS.get(event)
        reference = (
            UNDEFINED_REFERENCE
            if license_reference is None
            else license_reference[:MAX_REFERENCE_LENGTH]
        )
        audit = AuditEvent(
            event_type=event,
            severity=Severity.INFO if step is not None else Severity.WARN,
            license_reference=reference,
            info="" if info is None else info[:MAX_INFO_LENGTH],
        )
        self._events.append(audit)
        index = len(self._events) - 1
        if step is not None:
            if step > self._step:
                self._most_advanced.clear()
                self._step = step
            if step == self._step:
                self._most_advanced[reference] = index
        elif reference in self._most_advanced:
            self._most_advanced[reference] = index
        return audit

    def append(self, other: "EventRegistry") -> None:
        """Add copies of all events of another registry to this one."""
        self._events.extend(replace(event) for event in other._events)

    def _tracked(self) -> list[AuditEvent]:
        return [self._events[index] for _, index in sorted(self._most_advanced.items())]

    def last_failure(self) -> Optional[AuditEvent]:
        """The error of the most advanced license, else the latest error."""
        for event in self._tracked():
            if event.severity is Severity.ERROR:
                return event
        for event in reversed(self._events):
            if event.severity is Severity.ERROR:
                return event
        return None

    def turn_warnings_into_errors(self) -> bool:
        """Escalate the warnings of the most advanced licenses.

        If none of those licenses has a warning, every warning is escalated.
        Returns whether any event is now an error.
        """
        found = False
        for event in self._tracked():
            if event.severity in (Severity.WARN, Severity.ERROR):
                event.severity = Severity.ERROR
                found = True
        if not found:
            for event in self._events:
                if event.severity is Severity.WARN:
                    event.severity = Severity.ERROR
                    found = True
        return found

    def turn_errors_into_warnings(self) -> bool:
        """Downgrade every error to a warning; returns whether any was found."""
        found = False
        for event in self._events:
            if event.severity is Severity.ERROR:
                event.severity = Severity.WARN
                found = True
        return found

    def is_good(self) -> bool:
        return self.last_failure() is None

    def last_events(self, count: int) -> list[AuditEvent]:
        """The most recent events, at most ``count`` of them, oldest first."""
        if count <= 0:
            return []
        return [replace(event) for event in self._events[-count:]]