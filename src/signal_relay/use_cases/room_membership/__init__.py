"""
Room membership operations for the signaling relay.

Each operation takes the Socket.IO server (for room multicast and
per-connection delivery) and the RoomRegistry that owns membership.
"""

from .join_room import join_room
from .leave_room import leave_rooms
from .relay_signal import relay_signal

__all__ = ["join_room", "leave_rooms", "relay_signal"]
