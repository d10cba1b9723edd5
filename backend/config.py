import os

BACKEND_ROOT = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
    # Question bank (JSON list of {id, text, choices, answerIndex})
    QUESTIONS_FILE = os.environ.get('QUESTIONS_FILE') or os.path.join(BACKEND_ROOT, 'questions.json')
    # Contest timers (seconds)
    QUESTION_DURATION_SEC = int(os.environ.get('QUESTION_DURATION_SEC', '60'))
    REVEAL_DURATION_SEC = int(os.environ.get('REVEAL_DURATION_SEC', '3'))
    SKIP_DURATION_SEC = int(os.environ.get('SKIP_DURATION_SEC', '2'))
    # Scoring and contest length
    POINTS_PER_CORRECT = int(os.environ.get('POINTS_PER_CORRECT', '10'))
    DEFAULT_QUESTION_COUNT = int(os.environ.get('DEFAULT_QUESTION_COUNT', '10'))
    MAX_QUESTION_COUNT = int(os.environ.get('MAX_QUESTION_COUNT', '50'))
    # Room codes
    ROOM_CODE_LENGTH = int(os.environ.get('ROOM_CODE_LENGTH', '5'))
    ROOM_CODE_ATTEMPTS = int(os.environ.get('ROOM_CODE_ATTEMPTS', '20'))
