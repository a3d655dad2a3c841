"""
In-memory room membership table for the signaling relay.

Rooms are created lazily on first join and discarded as soon as their
member set becomes empty. Member order is join order. All operations are
synchronous, so a handler running on the event loop always sees a
consistent table without locking.
"""

from typing import Dict, List, Optional


class RoomRegistry:
    """
    Tracks which connection IDs belong to which room.

    Each room maps member IDs to the display name chosen at join time.
    """

    def __init__(self):
        self._rooms: Dict[str, Dict[str, str]] = {}

    def add_member(self, room_id: str, member_id: str, display_name: str) -> List[str]:
        """
        Register member_id in room_id, creating the room if needed.

        Returns:
            The members that were already in the room, excluding member_id.
            Repeated joins do not duplicate the member.
        """
        room = self._rooms.setdefault(room_id, {})
        existing = [mid for mid in room if mid != member_id]
        room[member_id] = display_name
        return existing

    def remove_member(self, member_id: str) -> Dict[str, List[str]]:
        """
        Remove member_id from every room it belongs to.

        Returns:
            Mapping of each room the member left to its remaining members.
            Rooms left empty are discarded and map to an empty list.
        """
        left = {}
        for room_id in list(self._rooms):
            room = self._rooms[room_id]
            if member_id not in room:
                continue
            del room[member_id]
            if not room:
                del self._rooms[room_id]
            left[room_id] = list(room)
        return left

    def members(self, room_id: str) -> List[str]:
        return list(self._rooms.get(room_id, {}))

    def room_of(self, member_id: str) -> Optional[str]:
        for room_id, room in self._rooms.items():
            if member_id in room:
                return room_id
        return None

    def display_name(self, member_id: str) -> Optional[str]:
        for room in self._rooms.values():
            if member_id in room:
                return room[member_id]
        return None

    def share_room(self, member_a: str, member_b: str) -> bool:
        """True when both members are in the same room."""
        return any(
            member_a in room and member_b in room for room in self._rooms.values()
        )

    def has_room(self, room_id: str) -> bool:
        return room_id in self._rooms

    def room_count(self) -> int:
        return len(self._rooms)

    def list_rooms(self) -> Dict[str, List[str]]:
        """List all rooms with their members in join order."""
        return {room_id: list(room) for room_id, room in self._rooms.items()}
