"""
Local Media

Acquires the local audio source once and exposes it as a track every
peer link can attach. Muting zeroes outgoing samples instead of removing
the track, so no renegotiation is needed.
"""

from aiortc import MediaStreamTrack
from aiortc.contrib.media import MediaPlayer, MediaRelay
from aiortc.mediastreams import AudioStreamTrack
from signal_relay.tools.logger import log_info, log_debug, log_warning
from typing import List, Optional


class MediaAccessError(Exception):
    """Raised when the local audio source cannot be opened."""


class MutableAudioTrack(MediaStreamTrack):
    """Audio track that forwards frames from a source, silenced while muted."""

    kind = "audio"

    def __init__(self, source: MediaStreamTrack):
        super().__init__()
        self._source = source
        self.muted = False

    async def recv(self):
        frame = await self._source.recv()
        if self.muted:
            for plane in frame.planes:
                plane.update(bytes(plane.buffer_size))
        return frame

    def stop(self):
        super().stop()
        self._source.stop()


class LocalMedia:
    """
    The local media capability.

    Args:
        source: File, device or URL understood by FFmpeg; None for a silent track
        format: FFmpeg input format, e.g. "pulse" or "alsa"
        options: Extra FFmpeg options
    """

    def __init__(self, source: Optional[str] = None, format: Optional[str] = None, options: Optional[dict] = None):
        self.source = source
        self.format = format
        self.options = options or {}
        self._player = None
        self._relay = MediaRelay()
        self._track: Optional[MutableAudioTrack] = None

    @property
    def acquired(self) -> bool:
        return self._track is not None

    @property
    def tracks(self) -> List[MediaStreamTrack]:
        return [self._track] if self._track is not None else []

    def outbound_tracks(self) -> List[MediaStreamTrack]:
        """
        Tracks for one more peer connection.

        Each call returns fresh relay subscriptions of the local track so
        every peer receives every frame.
        """
        return [self._relay.subscribe(track) for track in self.tracks]

    @property
    def muted(self) -> bool:
        return self._track is not None and self._track.muted

    def acquire(self) -> MutableAudioTrack:
        """
        Open the audio source. Calling it again returns the same track.

        Raises:
            MediaAccessError: if the source cannot be opened or has no audio
        """
        if self._track is not None:
            return self._track

        if self.source is None:
            log_info("No audio source configured, sending silence")
            source_track = AudioStreamTrack()
        else:
            try:
                self._player = MediaPlayer(
                    self.source, format=self.format, options=self.options
                )
            except Exception as e:
                raise MediaAccessError(
                    f"Cannot open audio source {self.source}: {e}"
                ) from e
            if self._player.audio is None:
                raise MediaAccessError(f"Audio source {self.source} has no audio stream")
            source_track = self._player.audio
            log_info(f"Acquired audio source {self.source}")

        self._track = MutableAudioTrack(source_track)
        return self._track

    def set_muted(self, muted: bool) -> bool:
        if self._track is None:
            log_warning("Cannot toggle mic mute: local audio not acquired")
            return False
        self._track.muted = muted
        log_info("Microphone muted." if muted else "Microphone unmuted.")
        return muted

    def toggle_mute(self) -> bool:
        """Flip the mute state and return the new one."""
        return self.set_muted(not self.muted)

    def release(self):
        """Stop the local track, releasing the underlying source."""
        if self._track is None:
            return
        self._track.stop()
        self._track = None
        self._player = None
        log_debug("Local audio released")
