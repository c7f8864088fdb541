"""Remote enrichment: client, call state and response sanitation."""

from remote.backoff import RemoteCallState
from remote.client import RemoteEnrichmentClient, RemoteCallError
from remote.encoding import FrameEncodeError, encode_frame
from remote.sanitize import RemoteResult, normalize_result, extract_json

__all__ = [
    "RemoteCallState",
    "RemoteEnrichmentClient",
    "RemoteCallError",
    "FrameEncodeError",
    "encode_frame",
    "RemoteResult",
    "normalize_result",
    "extract_json",
]
