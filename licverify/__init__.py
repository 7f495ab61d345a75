"""Reading, verifying and auditing INI-style software licenses."""

__version__ = "0.1.0"

__all__ = [
    "codec",
    "events",
    "files",
    "hw_identifier",
    "logfile",
    "reader",
    "textutil",
    "verifier",
]