from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the trivia contest server!'})


@main.route('/api/contests/<string:room_id>', methods=['GET'])
def get_contest(room_id):
    """
    Returns a public snapshot of a contest. The live question never
    includes its correct index.
    """
    session = current_app.extensions['contests'].lookup(room_id)
    if session is None:
        return jsonify({'error': 'Contest not found'}), 404
    return jsonify(session.snapshot())
