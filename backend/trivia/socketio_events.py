from flask import current_app, request
from flask_socketio import join_room, leave_room
from trivia import socketio
from trivia.services.contests import ContestError, SessionRegistry, SocketIOGateway
from typing import Any, Dict


def _registry() -> SessionRegistry:
    return current_app.extensions['contests']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _refuse(event: str, exc: ContestError) -> Dict[str, Any]:
    current_app.logger.info(f"[refused] event={event} sid={_get_sid()} code={exc.code}")
    return exc.to_ack()


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    sid = _get_sid()
    current_app.logger.info(f"[disconnect] sid={sid} reason={reason}")
    _registry().disconnect(sid)


def handle_create_contest(data=None):
    data = data or {}
    sid = _get_sid()
    name = data.get('name') or 'Host'
    try:
        room_id = _registry().create(sid, name, {'questionCount': data.get('questionCount')})
    except ContestError as exc:
        return _refuse('createContest', exc)
    join_room(SocketIOGateway.room_name(room_id))
    session = _registry().lookup(room_id)
    if session is not None:
        session.announce_lobby()
    return {'ok': True, 'roomId': room_id}


def handle_join_contest(data=None):
    data = data or {}
    room_id = str(data.get('roomId') or '').upper()
    name = data.get('name') or 'Anon'
    # Join the transport room first so the joiner receives its own lobbyUpdate
    room = SocketIOGateway.room_name(room_id)
    join_room(room)
    try:
        _registry().join(room_id, _get_sid(), name)
    except ContestError as exc:
        leave_room(room)
        return _refuse('joinContest', exc)
    return {'ok': True, 'roomId': room_id}


def handle_start_contest(data=None):
    data = data or {}
    try:
        _registry().start(data.get('roomId'), _get_sid())
    except ContestError as exc:
        return _refuse('startContest', exc)
    return {'ok': True}


def handle_answer(data=None):
    data = data or {}
    try:
        _registry().submit_answer(data.get('roomId'), _get_sid(), data.get('questionId'), data.get('choiceIndex'))
    except ContestError as exc:
        return _refuse('answer', exc)
    return {'ok': True}


def handle_leave_contest(data=None):
    data = data or {}
    room_id = str(data.get('roomId') or '').upper()
    _registry().leave(room_id, _get_sid())
    if room_id:
        leave_room(SocketIOGateway.room_name(room_id))
    return {'ok': True}


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers.

    Event names match the browser client: createContest, joinContest,
    startContest, answer, leaveContest. Each handler's return value is the
    acknowledgement sent back to the calling connection only.
    """
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createContest', handle_create_contest, namespace=namespace)
    socketio.on_event('joinContest', handle_join_contest, namespace=namespace)
    socketio.on_event('startContest', handle_start_contest, namespace=namespace)
    socketio.on_event('answer', handle_answer, namespace=namespace)
    socketio.on_event('leaveContest', handle_leave_contest, namespace=namespace)
