import pytest

from wordle_engine.models.game import GameSession, InvalidStateError
from wordle_engine.models.stats import PersistedState
from wordle_engine.services.statistics_service import StatisticsEngine
from tests.helpers import finished_game


@pytest.fixture
def engine():
    return StatisticsEngine(PersistedState())


def test_finalize_win_updates_counters(engine):
    engine.finalize(finished_game(guesses_to_win=3))
    stats = engine.statistics
    assert stats.games_played == 1
    assert stats.games_won == 1
    assert stats.current_streak == 1
    assert stats.max_streak == 1
    assert stats.guess_distribution == [0, 0, 1, 0, 0, 0]


def test_loss_resets_current_streak_but_keeps_max(engine):
    engine.finalize(finished_game(guesses_to_win=2))
    engine.finalize(finished_game(guesses_to_win=4))
    engine.finalize(finished_game(lose=True))
    stats = engine.statistics
    assert stats.current_streak == 0
    assert stats.max_streak == 2
    assert stats.games_played == 3
    assert sum(stats.guess_distribution) == 2


def test_guess_distribution_sums_to_wins(engine):
    counts = [1, 3, 2, 3, 6]
    for count in counts:
        engine.finalize(finished_game(guesses_to_win=count))
    distribution = engine.statistics.guess_distribution
    assert sum(distribution) == len(counts)
    assert distribution == [1, 1, 2, 0, 0, 1]


def test_finalize_rejects_double_recording(engine):
    session = finished_game(guesses_to_win=1)
    engine.finalize(session)
    with pytest.raises(InvalidStateError):
        engine.finalize(session)
    assert engine.statistics.games_played == 1


def test_finalize_rejects_game_in_progress(engine):
    with pytest.raises(InvalidStateError):
        engine.finalize(GameSession(secret_word="CRANE"))


def test_history_record_is_prepended(engine):
    first = finished_game(guesses_to_win=2)
    second = finished_game(lose=True)
    engine.finalize(first)
    engine.finalize(second)

    history = engine.get_history()
    assert [record.id for record in history] == [second.id, first.id]
    assert history[0].status == 'lost'
    assert history[0].guess_count == 6
    assert history[1].secret_word == 'CRANE'
    assert engine.get_history(limit=1) == history[:1]


def test_snapshot_derived_fields(engine):
    assert engine.get_snapshot()['win_percentage'] == 0
    assert engine.get_snapshot()['average_guesses'] == 0

    for count in (1, 3, 2):
        engine.finalize(finished_game(guesses_to_win=count))
    engine.finalize(finished_game(lose=True))

    snapshot = engine.get_snapshot()
    assert snapshot['win_percentage'] == 75
    assert snapshot['average_guesses'] == 2.0
    assert snapshot['games_played'] == 4


def test_win_percentage_rounds(engine):
    engine.finalize(finished_game(guesses_to_win=2))
    engine.finalize(finished_game(guesses_to_win=2))
    engine.finalize(finished_game(lose=True))
    assert engine.get_snapshot()['win_percentage'] == 67


def test_first_win_unlocks_exactly_once(engine):
    engine.finalize(finished_game(lose=True))
    assert not engine.has_achievement('first_win')

    unlocked = engine.finalize(finished_game(guesses_to_win=3))
    assert 'first_win' in [achievement.id for achievement in unlocked]
    unlocked_at = engine.get_achievements()[0].unlocked_at

    for _ in range(3):
        unlocked = engine.finalize(finished_game(guesses_to_win=2))
        assert 'first_win' not in [achievement.id for achievement in unlocked]

    first_wins = [a for a in engine.get_achievements() if a.id == 'first_win']
    assert len(first_wins) == 1
    assert first_wins[0].unlocked_at == unlocked_at


def test_perfect_game_achievement(engine):
    unlocked = engine.finalize(finished_game(guesses_to_win=1))
    assert {achievement.id for achievement in unlocked} == {'first_win', 'perfect_game'}


def test_streak_master_after_five_wins(engine):
    for _ in range(4):
        engine.finalize(finished_game(guesses_to_win=2))
    assert not engine.has_achievement('streak_master')
    unlocked = engine.finalize(finished_game(guesses_to_win=2))
    assert [achievement.id for achievement in unlocked] == ['streak_master']


def test_word_master_after_ten_games(engine):
    for _ in range(9):
        engine.finalize(finished_game(lose=True))
    assert not engine.has_achievement('word_master')
    engine.finalize(finished_game(lose=True))
    assert engine.has_achievement('word_master')


def test_achievements_stay_unlocked_after_streak_breaks(engine):
    for _ in range(5):
        engine.finalize(finished_game(guesses_to_win=2))
    engine.finalize(finished_game(lose=True))
    assert engine.has_achievement('streak_master')


def test_cleanup_old_data_prunes_by_completion_time():
    now = 1_700_000_000.0
    engine = StatisticsEngine(PersistedState(), clock=lambda: now)

    old = finished_game(guesses_to_win=2)
    old.started_at = now - 40 * 86400 - 60
    old.ended_at = now - 40 * 86400
    recent = finished_game(guesses_to_win=3)
    recent.started_at = now - 120
    recent.ended_at = now - 60
    engine.finalize(old)
    engine.finalize(recent)

    assert engine.cleanup_old_data(days_to_keep=30) == 1
    assert [record.id for record in engine.get_history()] == [recent.id]
    # Counters are stored, so pruning history leaves them alone
    assert engine.statistics.games_won == 2
    assert engine.get_snapshot()['average_guesses'] == 3.0


def test_pruned_game_cannot_be_recorded_again():
    now = 1_700_000_000.0
    engine = StatisticsEngine(PersistedState(), clock=lambda: now)

    old = finished_game(guesses_to_win=2)
    old.started_at = now - 40 * 86400 - 60
    old.ended_at = now - 40 * 86400
    engine.finalize(old)
    engine.cleanup_old_data(days_to_keep=30)
    assert engine.get_history() == []

    with pytest.raises(InvalidStateError):
        engine.finalize(old)
    assert engine.statistics.games_played == 1


def test_reset_clears_counters_and_achievements(engine):
    engine.finalize(finished_game(guesses_to_win=1))
    engine.reset()
    assert engine.statistics.games_played == 0
    assert engine.statistics.guess_distribution == [0] * 6
    assert engine.get_achievements() == []


def test_last_played_is_set(engine):
    engine.finalize(finished_game(guesses_to_win=2))
    assert engine.state.last_played is not None
