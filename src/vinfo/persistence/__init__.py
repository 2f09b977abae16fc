"""Reading, writing and merging of the state file."""

from .document import decode_document, encode_document, read_document, write_document
from .fingerprint import Fingerprint, fingerprint, fingerprints_equal
from .legacy import LegacyReader, read_legacy_file
from .loader import load_state
from .manager import InfoFileManager
from .merge import HistoryIndex, merge_states
from .serializer import serialize_state

__all__ = [
    "decode_document",
    "encode_document",
    "read_document",
    "write_document",
    "Fingerprint",
    "fingerprint",
    "fingerprints_equal",
    "LegacyReader",
    "read_legacy_file",
    "load_state",
    "InfoFileManager",
    "HistoryIndex",
    "merge_states",
    "serialize_state",
]
