"""
Signal payload codec.

Converts the JSON shapes carried in relay envelopes to and from aiortc
objects. A payload is exactly one of:

    {"type": "offer", "sdp": "..."}
    {"type": "answer", "sdp": "..."}
    {"candidate": "candidate:...", "sdpMid": "0", "sdpMLineIndex": 0}
"""

from aiortc import RTCIceCandidate, RTCSessionDescription
from aiortc.sdp import candidate_from_sdp, candidate_to_sdp
from typing import Optional

OFFER = "offer"
ANSWER = "answer"
CANDIDATE = "candidate"

CANDIDATE_PREFIX = "candidate:"


class SignalPayloadError(ValueError):
    """Raised when a payload is not an offer, an answer or a candidate."""


def signal_kind(data) -> str:
    """Return OFFER, ANSWER or CANDIDATE for a relay payload."""
    if not isinstance(data, dict):
        raise SignalPayloadError("Signal payload must be an object.")

    sdp_type = data.get("type")
    if sdp_type in (OFFER, ANSWER):
        if not isinstance(data.get("sdp"), str):
            raise SignalPayloadError(f"{sdp_type} payload is missing its sdp.")
        return sdp_type

    if "candidate" in data:
        if not isinstance(data["candidate"], str):
            raise SignalPayloadError("candidate must be a string.")
        sdp_mid = data.get("sdpMid")
        if sdp_mid is not None and not isinstance(sdp_mid, str):
            raise SignalPayloadError("sdpMid must be a string.")
        mline_index = data.get("sdpMLineIndex")
        if mline_index is not None and (
            isinstance(mline_index, bool) or not isinstance(mline_index, int)
        ):
            raise SignalPayloadError("sdpMLineIndex must be an integer.")
        return CANDIDATE

    raise SignalPayloadError(f"Unknown signal payload: {sorted(data)}")


def description_to_dict(description: RTCSessionDescription) -> dict:
    return {"type": description.type, "sdp": description.sdp}


def description_from_dict(data: dict) -> RTCSessionDescription:
    return RTCSessionDescription(sdp=data["sdp"], type=data["type"])


def candidate_to_dict(candidate: RTCIceCandidate) -> dict:
    return {
        "candidate": CANDIDATE_PREFIX + candidate_to_sdp(candidate),
        "sdpMid": candidate.sdpMid,
        "sdpMLineIndex": candidate.sdpMLineIndex,
    }


def candidate_from_dict(data: dict) -> Optional[RTCIceCandidate]:
    """
    Parse a browser-style candidate payload.

    Returns None for the end-of-candidates marker (empty candidate string).
    """
    candidate_str = data.get("candidate") or ""
    if candidate_str.startswith(CANDIDATE_PREFIX):
        candidate_str = candidate_str[len(CANDIDATE_PREFIX):]
    if not candidate_str.strip():
        return None

    candidate = candidate_from_sdp(candidate_str)
    candidate.sdpMid = data.get("sdpMid")
    candidate.sdpMLineIndex = data.get("sdpMLineIndex")
    return candidate
