## Socket.IO event names shared by the relay and its clients

JOIN = "join"
LEAVE = "leave"
RELAY = "relay"
EXISTING_MEMBERS = "existing-members"
PEER_JOINED = "peer-joined"
PEER_LEFT = "peer-left"
