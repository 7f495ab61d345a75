# licverify

`licverify` reads software licenses written as INI files and decides whether
a product may run. Each section of a license file names a product. The
section holds the license's limits and a signature over them. A limit can be
an expiry date, a start date, a client hardware signature or free-form extra
data. Every step of the check is recorded in an audit trail, so a refused
license comes with the reason it was refused.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## License file layout

```ini
[MYPRODUCT]
lic_ver = 200
valid-from = 2024-01-01
valid-to = 2030-12-31
client-signature = AAAA-BBBB-CCCC
extra-data = anything the application wants
sig = <base64 signature>
```

Section names and keys are matched without regard to case. A section needs
`sig`, and `lic_ver` must equal `200`. A section that lacks either is
reported as `LICENSE_MALFORMED`. Dates may be written as `YYYYMMDD`,
`YYYY-MM-DD` or `YYYY/MM/DD`. They count from local midnight.

## Checking a license

```python
from licverify.events import EventType
from licverify.reader import FileLicenseSource
from licverify.verifier import acquire_license

def signature_check(data: str, signature: str) -> bool:
    ...  # verify `signature` over `data` with your public key

def identifier_check(client_signature: str) -> EventType:
    ...  # EventType.LICENSE_OK if the identifier belongs to this machine

result, info = acquire_license(
    [FileLicenseSource(["product.lic"])], "myproduct", signature_check, identifier_check
)
if result is EventType.LICENSE_OK:
    print("licensed, days left:", info.days_left)
else:
    print("refused:", result.name)
    for event in info.status:
        print(event.event_type.name, event.severity.name, event.license_reference)
```

`acquire_license` returns an `EventType` and a `LicenseInfo`. If any license
passes, the result is `LICENSE_OK` and the info describes the best valid
license. Otherwise the result is the type of the most relevant failure, and
the info describes the best of the rejected licenses. The best license is the
first one without an expiry date or, failing that, the one with the most days
left. `info.status` holds the last five audit events.

If `identifier_check` is omitted, any license with a `client-signature` is
refused with `IDENTIFIERS_MISMATCH`. A date that cannot be read raises
`ValueError`.

## Modules

- `licverify.events`: `EventRegistry` records `AuditEvent`s, each with an
  `EventType` and a `Severity`. It tracks which license got furthest through
  validation, and `last_failure()` explains why a check failed.
  `turn_warnings_into_errors()` and `turn_errors_into_warnings()` settle the
  outcome. `is_good()` reports whether no error is left, and
  `last_events(count)` returns copies of the most recent entries.
- `licverify.codec`: `encode(data, line_length)` and `decode(text)`, the
  base64 flavour used for hardware identifiers. The encoder can break lines
  at a fixed width. The decoder ignores newlines and treats unknown
  characters as zero.
- `licverify.textutil`: `trim`, `upper`, `split`, `seconds_from_epoch` and
  `identify_format`. `identify_format` returns a `FileFormat`: `BASE64`,
  `INI` or `UNKNOWN`.
- `licverify.files`: `filter_existing_files(paths, registry, extra_data)`
  records `LICENSE_SPECIFIED`, then `LICENSE_FOUND` or
  `LICENSE_FILE_NOT_FOUND`, for each path. The module also has
  `get_file_contents(path, max_size)` and `remove_extension(path)`.
- `licverify.logfile`: an append-only, timestamped diagnostic log named
  `open-license.log` in the temporary directory, with `log_path()`,
  `log(message, *args)` and `shutdown_log()`.
- `licverify.hw_identifier`: `HwIdentifier` is an eight-byte hardware
  identifier. It holds a `HwStrategy`, seven bytes of strategy data and an
  environment-variable flag. `str()` gives its dash-separated form and
  `HwIdentifier.from_string()` parses it back. `IdentificationStrategy` is
  the abstract base for ways of finding the identifiers of the current
  machine. A subclass provides `identification_strategy` and
  `alternative_ids()`. `generate_pc_id()` returns the first identifier or
  raises `IdentifierUnavailable`. `validate_identifier()` returns
  `LICENSE_OK` or `IDENTIFIERS_MISMATCH`.
- `licverify.reader`: `LicenseReader(sources).read_licenses(product)` returns
  every complete license section for a product, each as a `FullLicenseInfo`,
  together with the `EventRegistry` of what happened. `FileLicenseSource`
  reads licenses from file paths. Any object with `license_locations()` and
  `retrieve_license_content()` can act as a source.
  `FullLicenseInfo.print_for_sign()` gives the exact text the signature
  covers: the upper-cased product name, then every key and value except
  `sig`, with keys in sorted order.
- `licverify.verifier`: `LicenseVerifier` checks signatures and limits and
  builds a `LicenseInfo` summary. `merge_licenses` picks the longest-lasting
  license, and `acquire_license` runs the whole process.

## Quick look at the helpers

```python
from licverify.codec import decode, encode
from licverify.textutil import identify_format, split

encoded = encode(b"hello world", 0)
assert decode(encoded) == b"hello world"

print(split("a.lic;b.lic", ";"))        # ['a.lic', 'b.lic']
print(identify_format("[MYPRODUCT]\nlic_ver = 200\n"))   # FileFormat.INI
```

## What the package does not do

- It does not verify signatures cryptographically. You pass a
  `signature_check` callable that does this with your own keys.
- It does not compute hardware identifiers. `IdentificationStrategy` is only
  a base class. Nothing in the package reads network adapters, disks or
  other hardware, or detects virtual machines and cloud providers. Binding a
  license to a machine needs your own strategy or `identifier_check`.
- It has no command-line tool for inspecting a machine or a license file.
  Everything is used from Python.