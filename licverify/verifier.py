"""Checking licenses: signatures, dates and hardware binding."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional

from .events import AuditEvent, EventRegistry, EventType
from .reader import (
    PARAM_BEGIN_DATE,
    PARAM_CLIENT_SIGNATURE,
    PARAM_EXPIRY_DATE,
    PARAM_EXTRA_DATA,
    FullLicenseInfo,
    LicenseReader,
    LicenseSource,
)
from .textutil import seconds_from_epoch

SignatureCheck = Callable[[str, str], bool]
IdentifierCheck = Callable[[str], EventType]

NO_EXPIRY_DAYS = 9999
AUDIT_EVENT_COUNT = 5
_SECONDS_PER_DAY = 60 * 60 * 24


@dataclass
class LicenseInfo:
    """What a caller learns about the license that was chosen."""

    has_expiry: bool = False
    days_left: int = 0
    expiry_date: str = ""
    linked_to_pc: bool = False
    proprietary_data: str = ""
    status: list[AuditEvent] = field(default_factory=list)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class LicenseVerifier:
    """Runs the checks on a license, recording the outcome in a registry.

    ``signature_check(data, signature)`` tells whether a signature is valid
    for the signed text; ``identifier_check(client_signature)`` tells whether
    a hardware identifier belongs to this machine.
    """

    def __init__(
        self,
        registry: EventRegistry,
        signature_check: SignatureCheck,
        identifier_check: Optional[IdentifierCheck] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._registry = registry
        self._signature_check = signature_check
        self._identifier_check = identifier_check
        self._clock = clock

    def verify_signature(self, info: FullLicenseInfo) -> bool:
        valid = bool(self._signature_check(info.print_for_sign(), info.license_signature))
        event = EventType.SIGNATURE_VERIFIED if valid else EventType.LICENSE_CORRUPTED
        self._registry.add_event(event, info.source)
        return valid

    def verify_limits(self, info: FullLicenseInfo) -> bool:
        """Check dates and hardware binding; ValueError for unreadable dates."""
        now = self._clock()
        expiry = info.limits.get(PARAM_EXPIRY_DATE)
        if expiry is not None and seconds_from_epoch(expiry) < now:
            self._registry.add_event(EventType.PRODUCT_EXPIRED, info.source, "Expired " + expiry)
            return False
        start = info.limits.get(PARAM_BEGIN_DATE)
        if start is not None and seconds_from_epoch(start) > now:
            self._registry.add_event(EventType.PRODUCT_EXPIRED, info.source, "Valid from " + start)
            return False
        client_signature = info.limits.get(PARAM_CLIENT_SIGNATURE)
        if client_signature is not None:
            event = (
                self._identifier_check(client_signature)
                if self._identifier_check is not None
                else EventType.IDENTIFIERS_MISMATCH
            )
            self._registry.add_event(event, info.source)
            return event is EventType.LICENSE_OK
        return True

    def to_license_info(self, info: FullLicenseInfo) -> LicenseInfo:
        result = LicenseInfo()
        expiry = info.limits.get(PARAM_EXPIRY_DATE)
        if expiry is not None:
            result.has_expiry = True
            result.expiry_date = expiry
            seconds = seconds_from_epoch(expiry) - self._clock()
            result.days_left = max(_round_half_away(seconds / _SECONDS_PER_DAY), 0)
        else:
            result.days_left = NO_EXPIRY_DAYS
        result.linked_to_pc = PARAM_CLIENT_SIGNATURE in info.limits
        result.proprietary_data = info.limits.get(PARAM_EXTRA_DATA, "")
        return result


def merge_licenses(licenses: Iterable[LicenseInfo]) -> Optional[LicenseInfo]:
    """The license that lasts longest: the first one without expiry, if any."""
    chosen: Optional[LicenseInfo] = None
    for license_info in licenses:
        if not license_info.has_expiry:
            return license_info
        if chosen is None or chosen.days_left < license_info.days_left:
            chosen = license_info
    return chosen


def _failure_type(registry: EventRegistry) -> EventType:
    failure = registry.last_failure()
    return failure.event_type if failure is not None else EventType.LICENSE_FILE_NOT_FOUND


def acquire_license(
    sources: Iterable[LicenseSource],
    project: str,
    signature_check: SignatureCheck,
    identifier_check: Optional[IdentifierCheck] = None,
) -> tuple[EventType, LicenseInfo]:
    """Find and check the licenses of ``project``.

    Returns LICENSE_OK with the best valid license, or the reason of the
    most relevant failure with the best of the rejected licenses.
    """
    licenses, registry = LicenseReader(sources).read_licenses(project)
    chosen: Optional[LicenseInfo]
    if licenses:
        verifier = LicenseVerifier(registry, signature_check, identifier_check)
        valid: list[LicenseInfo] = []
        rejected: list[LicenseInfo] = []
        for full_info in licenses:
            signature_ok = verifier.verify_signature(full_info)
            license_info = verifier.to_license_info(full_info)
            if signature_ok and verifier.verify_limits(full_info):
                valid.append(license_info)
            else:
                rejected.append(license_info)
        if valid:
            registry.turn_errors_into_warnings()
            result = EventType.LICENSE_OK
            chosen = merge_licenses(valid)
        else:
            registry.turn_warnings_into_errors()
            result = _failure_type(registry)
            chosen = merge_licenses(rejected)
    else:
        registry.turn_warnings_into_errors()
        result = _failure_type(registry)
        chosen = None
    outcome = replace(chosen) if chosen is not None else LicenseInfo()
    outcome.status = registry.last_events(AUDIT_EVENT_COUNT)
    return result, outcome