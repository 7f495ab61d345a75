"""Reading license files: one ini section per licensed product."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Union

from .events import EventRegistry, EventType
from .files import filter_existing_files, get_file_contents
from .textutil import trim, upper

PARAM_EXPIRY_DATE = "valid-to"
PARAM_BEGIN_DATE = "valid-from"
PARAM_VERSION_FROM = "start-version"
PARAM_CLIENT_SIGNATURE = "client-signature"
PARAM_VERSION_TO = "end-version"
PARAM_EXTRA_DATA = "extra-data"
LICENSE_SIGNATURE = "sig"
LICENSE_VERSION = "lic_ver"
SUPPORTED_LICENSE_VERSION = 200
MAX_LICENSE_SIZE = 64 * 1024

_LONG = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|\d+)")


class LicenseSource(Protocol):
    """Somewhere licenses can be found."""

    def license_locations(self, registry: EventRegistry) -> list[str]:
        ...

    def retrieve_license_content(self, location: str) -> Union[str, bytes]:
        ...


class FileLicenseSource:
    """Licenses stored in files at known paths."""

    def __init__(self, paths: Iterable[str], max_size: int = MAX_LICENSE_SIZE) -> None:
        self._paths = list(paths)
        self._max_size = max_size

    def license_locations(self, registry: EventRegistry) -> list[str]:
        return filter_existing_files(self._paths, registry)

    def retrieve_license_content(self, location: str) -> bytes:
        return get_file_contents(location, self._max_size)


@dataclass
class FullLicenseInfo:
    """Everything read from one product section of a license."""

    source: str
    project: str
    license_signature: str
    magic: int = 0
    limits: dict[str, str] = field(default_factory=dict)

    def print_for_sign(self) -> str:
        """The text the license signature is computed over."""
        parts = [upper(trim(self.project))]
        parts.extend(
            trim(key) + trim(value)
            for key, value in sorted(self.limits.items())
            if key != LICENSE_SIGNATURE
        )
        return "".join(parts)


_Section = dict[str, tuple[str, str]]


def _parse_ini(content: Union[str, bytes, bytearray]) -> dict[str, _Section]:
    """Sections keyed by upper-cased name; entries keyed by upper-cased key."""
    if isinstance(content, (bytes, bytearray)):
        try:
            text = bytes(content).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ValueError("license content is not text") from exc
    else:
        text = content
    text = text.lstrip("\ufeff")
    sections: dict[str, _Section] = {}
    current = sections.setdefault("", {})
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line[0] in ";#":
            continue
        if line.startswith("["):
            end = line.find("]")
            if end != -1:
                current = sections.setdefault(upper(line[1:end].strip()), {})
                continue
        key, separator, value = line.partition("=")
        if not separator:
            continue
        key = key.strip()
        lookup = upper(key)
        name = current[lookup][0] if lookup in current else key
        current[lookup] = (name, value.strip())
    return sections


def _parse_long(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    match = _LONG.match(value)
    if match is None:
        return default
    sign, digits = match.groups()
    number = int(digits, 16) if digits[:2].lower() == "0x" else int(digits, 10)
    return -number if sign == "-" else number


class LicenseReader:
    """Looks for a product's licenses in every given source."""

    def __init__(self, sources: Iterable[LicenseSource]) -> None:
        self._sources = list(sources)

    def read_licenses(self, product: str) -> tuple[list[FullLicenseInfo], EventRegistry]:
        """Complete licenses for ``product`` and the events met finding them."""
        registry = EventRegistry()
        if not self._sources:
            registry.add_event(EventType.LICENSE_FILE_NOT_FOUND)
            registry.turn_warnings_into_errors()
            return [], registry

        product_key = upper(product)
        licenses: list[FullLicenseInfo] = []
        for source in self._sources:
            for location in source.license_locations(registry):
                content = source.retrieve_license_content(location)
                try:
                    sections = _parse_ini(content)
                except ValueError:
                    registry.add_event(EventType.FILE_FORMAT_NOT_RECOGNIZED, location)
                    continue
                section = sections.get(product_key)
                if not section:
                    registry.add_event(EventType.PRODUCT_NOT_LICENSED, location)
                    continue
                registry.add_event(EventType.PRODUCT_FOUND, location)
                signature = section.get(upper(LICENSE_SIGNATURE))
                version = section.get(upper(LICENSE_VERSION))
                version_number = _parse_long(version[1] if version else None, -1)
                if signature is not None and version_number == SUPPORTED_LICENSE_VERSION:
                    licenses.append(
                        FullLicenseInfo(
                            source=location,
                            project=product,
                            license_signature=signature[1],
                            limits=dict(section.values()),
                        )
                    )
                else:
                    registry.add_event(EventType.LICENSE_MALFORMED, location)
        if not licenses:
            registry.turn_warnings_into_errors()
        return licenses, registry