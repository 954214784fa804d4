import pytest

from wordle_engine.services import game_service as game_service_module


def start(client, word_list=("crane",)):
    return client.post('/api/new_game', json={'word_list': list(word_list)})


def test_new_game_hides_answer(client):
    response = start(client)
    assert response.status_code == 200
    data = response.get_json()
    assert data['success'] is True
    assert data['state']['answer'] is None
    assert data['state']['status'] == 'playing'


def test_state_without_game_is_404(client):
    response = client.get('/api/game/state')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_letter_entry(client):
    start(client)
    response = client.post('/api/game/letter', json={'letter': 'c'})
    assert response.get_json()['changed'] is True
    assert response.get_json()['state']['current_input'] == 'C'

    response = client.delete('/api/game/letter')
    assert response.get_json()['state']['current_input'] == ''
    assert client.delete('/api/game/letter').get_json()['changed'] is False

    assert client.post('/api/game/letter', json={}).status_code == 400


def test_guess_flow_until_win(client):
    start(client)
    response = client.post('/api/game/guess', json={'guess': 'slate'})
    assert response.status_code == 200
    data = response.get_json()
    assert data['outcome']['result'] == ['absent', 'absent', 'correct', 'absent', 'correct']
    assert data['state']['remaining_guesses'] == 5

    response = client.post('/api/game/guess', json={'guess': 'crane'})
    data = response.get_json()
    assert data['outcome']['status'] == 'won'
    assert data['outcome']['unlocked_achievements'] == ['first_win']
    assert data['state']['answer'] == 'CRANE'

    response = client.post('/api/game/guess', json={'guess': 'slate'})
    assert response.status_code == 409


def test_submit_typed_letters(client):
    start(client)
    for letter in 'CRANE':
        client.post('/api/game/letter', json={'letter': letter})
    data = client.post('/api/game/guess').get_json()
    assert data['outcome']['status'] == 'won'


def test_rejected_guess(client):
    start(client)
    response = client.post('/api/game/guess', json={'guess': 'zzzzz'})
    assert response.status_code == 400
    data = response.get_json()
    assert data['reason'] == 'NOT_IN_DICTIONARY'
    assert data['state']['current_input'] == ''

    response = client.post('/api/game/guess', json={'guess': 'cr4ne'})
    assert response.status_code == 400


@pytest.mark.parametrize("guess, reason", [
    ("HELLOXYZ", "WRONG_LENGTH"),
    ("HE-L1LO", "WRONG_LENGTH"),
    ("HE-LO", "INVALID_CHARACTERS"),
])
def test_malformed_guess_is_not_truncated_into_a_word(client, guess, reason):
    start(client, ("hello",))
    response = client.post('/api/game/guess', json={'guess': guess})
    assert response.status_code == 400
    data = response.get_json()
    assert data['reason'] == reason
    assert data['state']['guesses'] == []
    assert data['state']['status'] == 'playing'
    assert data['state']['current_input'] == ''


def test_hint_endpoint(client):
    start(client)
    data = client.get('/api/game/hint').get_json()
    assert data['hint'] == {'position': 1, 'letter': 'C'}

    client.post('/api/game/guess', json={'guess': 'crane'})
    data = client.get('/api/game/hint').get_json()
    assert data['success'] is True
    assert data['hint'] is None
    assert data['message'] == 'No more hints available'


def test_hint_without_game_is_409(client):
    assert client.get('/api/game/hint').status_code == 409


def test_guess_without_game_is_409(client):
    assert client.post('/api/game/guess', json={'guess': 'crane'}).status_code == 409


def test_statistics_history_and_achievements(client):
    start(client)
    client.post('/api/game/guess', json={'guess': 'crane'})

    stats = client.get('/api/statistics').get_json()['statistics']
    assert stats['games_played'] == 1
    assert stats['win_percentage'] == 100
    assert stats['guess_distribution'] == [1, 0, 0, 0, 0, 0]

    history = client.get('/api/history?limit=5').get_json()['history']
    assert history[0]['secret_word'] == 'CRANE'

    achievements = client.get('/api/achievements').get_json()['achievements']
    assert {a['id'] for a in achievements} == {'first_win', 'perfect_game'}


def test_settings(client):
    assert client.get('/api/settings').get_json()['settings']['animations'] is True

    response = client.put('/api/settings', json={'colorblind_mode': True})
    assert response.get_json()['settings']['colorblind_mode'] is True

    assert client.put('/api/settings', json={'volume': 3}).status_code == 400


def test_reset(client):
    start(client)
    client.post('/api/game/guess', json={'guess': 'crane'})

    response = client.post('/api/reset', json={'scope': 'statistics'})
    assert response.get_json()['statistics']['games_played'] == 0
    assert client.get('/api/game/state').status_code == 200

    client.post('/api/reset', json={})
    assert client.get('/api/game/state').status_code == 404
    assert client.post('/api/reset', json={'scope': 'everything'}).status_code == 400


def test_dictionary_endpoints(client):
    validation = client.get('/api/dictionary/validate/hello').get_json()['validation']
    assert validation['valid'] is True
    assert validation['is_common'] is True

    validation = client.get('/api/dictionary/validate/qwert').get_json()['validation']
    assert validation['reason'] == 'NOT_IN_DICTIONARY'

    response = client.post('/api/dictionary/words', json={'words': ['qwert', 'no']})
    data = response.get_json()
    assert data['successful'] == 1
    assert data['failed'] == 1
    assert client.get('/api/dictionary/validate/qwert').get_json()['validation']['valid'] is True

    suggestions = client.get('/api/dictionary/suggestions?prefix=qw').get_json()['suggestions']
    assert suggestions == ['QWERT']

    assert client.delete('/api/dictionary/words/qwert').status_code == 200
    assert client.delete('/api/dictionary/words/qwert').status_code == 404

    client.put('/api/dictionary/import', json={'words': ['apple', 'lemon']})
    assert client.get('/api/dictionary/export').get_json()['words'] == ['APPLE', 'LEMON']

    client.post('/api/dictionary/reset')
    assert client.get('/api/dictionary/stats').get_json()['stats']['custom_words'] == 0

    assert client.post('/api/dictionary/words', json={'words': 'apple'}).status_code == 400


def test_health(client):
    data = client.get('/api/health').get_json()
    assert data['status'] == 'healthy'
    assert data['dictionary_size'] > 0


def test_service_unavailable(client):
    game_service_module._game_service = None
    response = client.get('/api/statistics')
    assert response.status_code == 500
    assert response.get_json()['error'] == 'Game service unavailable'
