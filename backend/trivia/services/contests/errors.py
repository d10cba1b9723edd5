class ContestError(Exception):
    """A request the contest refused. Reported to the caller only."""

    code = 'ContestError'
    message = 'Contest error'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    def to_ack(self):
        return {'ok': False, 'error': str(self), 'code': self.code}


class UnknownRoom(ContestError):
    code = 'UnknownRoom'
    message = 'No such contest'


class NotHost(ContestError):
    code = 'NotHost'
    message = 'Not host'


class AlreadyRunning(ContestError):
    code = 'AlreadyRunning'
    message = 'Already running'


class ContestOver(ContestError):
    code = 'ContestOver'
    message = 'Contest has already ended'


class NoActiveQuestion(ContestError):
    code = 'NoActiveQuestion'
    message = 'No active question'


class QuestionMismatch(ContestError):
    code = 'QuestionMismatch'
    message = 'Question mismatch'


class AlreadyAnswered(ContestError):
    code = 'AlreadyAnswered'
    message = 'Already answered'


class NotInRoom(ContestError):
    code = 'NotInRoom'
    message = 'You are not in this contest'


class InvalidChoice(ContestError):
    code = 'InvalidChoice'
    message = 'Invalid choice'


class RoomAllocationError(ContestError):
    code = 'RoomAllocationError'
    message = 'Could not allocate a room code'
