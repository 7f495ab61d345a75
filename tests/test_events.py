import pytest

from licverify.events import (
    UNDEFINED_REFERENCE,
    AuditEvent,
    EventRegistry,
    EventType,
    Severity,
)


def test_failure_event_is_a_warning_until_escalated():
    registry = EventRegistry()
    event = registry.add_event(EventType.LICENSE_FILE_NOT_FOUND, "a.lic")
    assert event.severity is Severity.WARN
    assert registry.last_failure() is None
    assert registry.is_good()
    assert registry.turn_warnings_into_errors() is True
    failure = registry.last_failure()
    assert failure.event_type is EventType.LICENSE_FILE_NOT_FOUND
    assert failure.severity is Severity.ERROR
    assert not registry.is_good()


@pytest.mark.parametrize(
    "event_type",
    [
        EventType.LICENSE_SPECIFIED,
        EventType.LICENSE_FOUND,
        EventType.PRODUCT_FOUND,
        EventType.SIGNATURE_VERIFIED,
        EventType.LICENSE_OK,
    ],
)
def test_success_events_are_info(event_type):
    registry = EventRegistry()
    assert registry.add_event(event_type, "x").severity is Severity.INFO
    assert registry.turn_warnings_into_errors() is False
    assert registry.is_good()


def test_validation_step_follows_progress():
    registry = EventRegistry()
    assert registry.validation_step == -1
    registry.add_event(EventType.LICENSE_SPECIFIED, "a")
    registry.add_event(EventType.PRODUCT_FOUND, "a")
    registry.add_event(EventType.LICENSE_FOUND, "b")
    assert registry.validation_step == 2


def test_only_most_advanced_license_is_escalated():
    registry = EventRegistry()
    registry.add_event(EventType.LICENSE_SPECIFIED, "a")
    registry.add_event(EventType.LICENSE_FOUND, "a")
    registry.add_event(EventType.LICENSE_SPECIFIED, "b")
    registry.add_event(EventType.LICENSE_FILE_NOT_FOUND, "b")
    registry.add_event(EventType.PRODUCT_FOUND, "a")
    registry.add_event(EventType.LICENSE_MALFORMED, "a")

    assert registry.turn_warnings_into_errors() is True
    events = list(registry)
    assert events[3].severity is Severity.WARN
    assert events[5].severity is Severity.ERROR
    assert registry.last_failure().event_type is EventType.LICENSE_MALFORMED


def test_escalates_all_warnings_when_nothing_progressed():
    registry = EventRegistry()
    registry.add_event(EventType.LICENSE_FILE_NOT_FOUND, "a")
    registry.add_event(EventType.PRODUCT_NOT_LICENSED, "b")
    assert registry.turn_warnings_into_errors() is True
    assert all(event.severity is Severity.ERROR for event in registry)
    last = registry.last_failure()
    assert last.event_type is EventType.PRODUCT_NOT_LICENSED
    assert last.license_reference == "b"


def test_errors_turned_back_into_warnings():
    registry = EventRegistry()
    registry.add_event(EventType.LICENSE_CORRUPTED, "a")
    registry.turn_warnings_into_errors()
    assert registry.turn_errors_into_warnings() is True
    assert registry.is_good()
    assert registry.turn_errors_into_warnings() is False


def test_default_reference_and_info():
    registry = EventRegistry()
    event = registry.add_event(EventType.LICENSE_MALFORMED)
    assert event.license_reference == UNDEFINED_REFERENCE
    assert event.info == ""


def test_info_is_truncated():
    registry = EventRegistry()
    event = registry.add_event(EventType.PRODUCT_EXPIRED, "a", "x" * 1000)
    assert len(event.info) == 255


def test_last_events():
    registry = EventRegistry()
    kinds = [EventType.LICENSE_SPECIFIED, EventType.LICENSE_FOUND, EventType.PRODUCT_FOUND]
    for kind in kinds:
        registry.add_event(kind, "a")
    assert [e.event_type for e in registry.last_events(2)] == kinds[1:]
    assert [e.event_type for e in registry.last_events(100)] == kinds
    assert registry.last_events(0) == []


def test_append_keeps_order_and_copies():
    first = EventRegistry()
    first.add_event(EventType.LICENSE_SPECIFIED, "a")
    second = EventRegistry()
    second.add_event(EventType.LICENSE_CORRUPTED, "b")
    first.append(second)
    assert [e.event_type for e in first] == [
        EventType.LICENSE_SPECIFIED,
        EventType.LICENSE_CORRUPTED,
    ]
    first.turn_warnings_into_errors()
    assert list(second)[0].severity is Severity.WARN
    assert len(first) == 2


def test_string_form():
    registry = EventRegistry()
    registry.add_event(EventType.LICENSE_FOUND, "a")
    text = str(registry)
    assert text.startswith("EventReg[step:1,events:{")
    assert "[ev:LICENSE_FOUND,sev:INFOref:a]" in text


def test_audit_event_defaults():
    event = AuditEvent(EventType.LICENSE_OK, Severity.INFO)
    assert event.license_reference == UNDEFINED_REFERENCE