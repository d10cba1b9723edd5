def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_unknown_contest_is_404(client):
    res = client.get('/api/contests/ZZZZZ')
    assert res.status_code == 404


def test_contest_snapshot(flask_app, client):
    registry = flask_app.extensions['contests']
    room_id = registry.create('host-sid', 'Hal', {'questionCount': 3})
    res = client.get(f'/api/contests/{room_id}')
    assert res.status_code == 200
    data = res.get_json()
    assert data['roomId'] == room_id
    assert data['state'] == 'idle'
    assert data['questionCount'] == 3
    assert data['question'] is None
    assert data['leaderboard'] == [{'socketId': 'host-sid', 'name': 'Hal', 'score': 0}]

    registry.start(room_id, 'host-sid')
    data = client.get(f'/api/contests/{room_id.lower()}').get_json()
    assert data['state'] == 'question_open'
    assert data['question']['id'] == 'q-sum'
    assert 'answerIndex' not in data['question']


def test_questions_command(flask_app):
    runner = flask_app.test_cli_runner()
    result = runner.invoke(args=['questions'])
    assert result.exit_code == 0
    assert '1 question(s) available' in result.output
