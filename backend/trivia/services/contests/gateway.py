class SocketIOGateway:
    """Fan-out to a contest room or a single connection over Socket.IO."""

    def __init__(self, socketio, namespace='/'):
        self.socketio = socketio
        self.namespace = namespace

    @staticmethod
    def room_name(room_id: str) -> str:
        return f"contest:{room_id}"

    def to_room(self, room_id: str, event: str, payload: dict) -> None:
        # Use socketio.emit since this may be called from a background task
        self.socketio.emit(event, payload, to=self.room_name(room_id), namespace=self.namespace)

    def to_connection(self, connection_id: str, event: str, payload: dict) -> None:
        self.socketio.emit(event, payload, to=connection_id, namespace=self.namespace)

    def close_room(self, room_id: str) -> None:
        self.socketio.close_room(self.room_name(room_id), namespace=self.namespace)
