import threading


class TimerHandle:
    """A pending deferred call. ``cancel()`` is safe to call at any time."""

    def __init__(self, delay, callback, args):
        self.delay = delay
        self.callback = callback
        self.args = args
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()


class SocketIOScheduler:
    """Runs deferred contest transitions as Socket.IO background tasks.

    Each timer sleeps with ``socketio.sleep`` so it cooperates with whatever
    async mode the server picked, then re-enters the contest inside an app
    context unless it was cancelled in the meantime. Callbacks are expected
    to re-check contest state themselves; cancellation only saves the wakeup.
    """

    def __init__(self, socketio, app):
        self.socketio = socketio
        self.app = app

    def call_later(self, delay, callback, *args) -> TimerHandle:
        handle = TimerHandle(delay, callback, args)
        self.socketio.start_background_task(self._worker, handle)
        return handle

    def _worker(self, handle: TimerHandle) -> None:
        self.socketio.sleep(handle.delay)
        if handle.cancelled:
            return
        with self.app.app_context():
            try:
                handle.callback(*handle.args)
            except Exception:
                self.app.logger.exception(f"[timer-error] callback={getattr(handle.callback, '__name__', handle.callback)}")
