"""
WebRTC Media Module

Local audio capture shared by every peer link, and sinks for remote audio.
"""

from .local_media import LocalMedia, MediaAccessError, MutableAudioTrack

__all__ = ["LocalMedia", "MediaAccessError", "MutableAudioTrack"]
