"""
Brute force strategy tests.

Drive the strategy by hand against small games whose every step can be
traced, then check the phase, the bookkeeping and the emitted events.
"""

import pytest

from perfectmatch import audit
from perfectmatch.audit import AuditTrail
from perfectmatch.contestant import ContestantPair, contestants_to_pairs, gen_contestants
from perfectmatch.errors import NEGATIVE_CORRECT, NO_CANDIDATES, InvariantViolation
from perfectmatch.gamemaster import GameMaster
from perfectmatch.spi.game_strategy import Correct, Wrong
from perfectmatch.strategy import BruteForceStrategy, StrategyPhase, resolve_strategy


def _pair(c, i, j) -> ContestantPair:
    return ContestantPair(c[i], c[j])


def test_odd_contestant_count_rejected():
    with pytest.raises(ValueError):
        BruteForceStrategy(gen_contestants(5))


def test_two_contestant_game_walks_every_phase():
    c = gen_contestants(2)
    strategy = BruteForceStrategy(c)
    assert strategy.phase == StrategyPhase.AWAITING_CEREMONY_GUESS

    guess = strategy.ceremony_pairs()
    assert guess == [_pair(c, 0, 1)]
    assert strategy.phase == StrategyPhase.AWAITING_CEREMONY_FEEDBACK

    strategy.ceremony_feedback(1, guess)
    assert strategy.phase == StrategyPhase.AWAITING_BOOTH_GUESS
    assert len(strategy.round_manager) == 1

    pair = strategy.send_to_booth()
    assert pair == _pair(c, 0, 1)
    assert strategy.phase == StrategyPhase.AWAITING_BOOTH_FEEDBACK
    # a round at 1/1 does not beat a contestant with one candidate
    assert strategy.last_booth_source == "possibilities"

    strategy.booth_feedback(Correct(pair))
    assert strategy.phase == StrategyPhase.COMPLETE
    assert strategy.is_solved
    assert strategy.perfect_matches == [_pair(c, 0, 1)]
    assert len(strategy.round_manager) == 0

    with pytest.raises(InvariantViolation) as exc_info:
        strategy.send_to_booth()
    assert exc_info.value.code == NO_CANDIDATES


def test_zero_new_matches_excludes_whole_guess():
    c = gen_contestants(4)
    strategy = BruteForceStrategy(c)

    guess = strategy.ceremony_pairs()
    assert guess == [_pair(c, 0, 1), _pair(c, 2, 3)]
    strategy.ceremony_feedback(0, guess)

    assert strategy.possibilities.is_excluded(c[0], c[1])
    assert strategy.possibilities.is_excluded(c[2], c[3])
    assert len(strategy.round_manager) == 0


def test_new_matches_saved_as_round_without_confirmed_pairs():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    strategy.send_to_booth()
    strategy.booth_feedback(Correct(_pair(c, 0, 1)))

    guess = strategy.ceremony_pairs()
    assert guess[0] == _pair(c, 0, 1)
    strategy.ceremony_feedback(2, guess)

    saved = strategy.round_manager.latest()
    assert saved.num_correct == 1
    assert _pair(c, 0, 1) not in saved.guesses
    assert saved.guesses == guess[1:]


def test_fewer_right_than_confirmed_is_fatal():
    c = gen_contestants(4)
    strategy = BruteForceStrategy(c)
    strategy.booth_feedback(Correct(_pair(c, 0, 2)))

    guess = strategy.ceremony_pairs()
    with pytest.raises(InvariantViolation) as exc_info:
        strategy.ceremony_feedback(0, guess)
    assert exc_info.value.code == NEGATIVE_CORRECT


def test_booth_prefers_a_promising_round():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    guess = strategy.ceremony_pairs()
    strategy.ceremony_feedback(2, guess)

    # 2/3 against 1/5
    pair = strategy.send_to_booth()

    assert strategy.last_booth_source == "round"
    assert pair == guess[0]
    assert strategy.round_manager.times_round_used == 1


def test_booth_falls_back_to_most_constrained_contestant():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    strategy.booth_feedback(Wrong(_pair(c, 3, 0)))
    strategy.booth_feedback(Wrong(_pair(c, 3, 1)))

    pair = strategy.send_to_booth()

    assert strategy.last_booth_source == "possibilities"
    assert pair == _pair(c, 3, 2)


def test_wrong_booth_answer_retires_round_guess():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    guess = strategy.ceremony_pairs()
    strategy.ceremony_feedback(1, guess)

    strategy.booth_feedback(Wrong(guess[0]))

    saved = strategy.round_manager.latest()
    assert guess[0] not in saved.live_guesses
    assert saved.probability() == pytest.approx(1 / 2)
    assert strategy.possibilities.is_excluded(guess[0].a, guess[0].b)


def test_ceremony_round_skips_pairs_already_ruled_out():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    strategy.booth_feedback(Wrong(_pair(c, 0, 1)))

    strategy.ceremony_feedback(1, [_pair(c, 0, 1), _pair(c, 2, 3), _pair(c, 4, 5)])

    saved = strategy.round_manager.latest()
    assert saved.guesses == [_pair(c, 2, 3), _pair(c, 4, 5)]
    assert saved.probability() == pytest.approx(1 / 2)


def test_booth_keeps_moving_after_repeated_misses():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    strategy.booth_feedback(Wrong(_pair(c, 0, 1)))
    strategy.ceremony_feedback(1, [_pair(c, 0, 1), _pair(c, 2, 3), _pair(c, 4, 5)])

    asked = []
    for _ in range(3):
        pair = strategy.send_to_booth()
        asked.append((pair, strategy.last_booth_source))
        strategy.booth_feedback(Wrong(pair))

    assert asked == [
        (_pair(c, 2, 3), "round"),
        (_pair(c, 4, 5), "round"),
        (_pair(c, 0, 2), "possibilities"),
    ]
    assert len(strategy.round_manager) == 0


def test_miss_retires_round_guess_already_excluded_in_map():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    strategy.booth_feedback(Wrong(_pair(c, 0, 1)))
    saved = strategy.round_manager.record_round([_pair(c, 0, 1), _pair(c, 2, 3)], 1)

    strategy.booth_feedback(Wrong(_pair(c, 1, 0)))

    assert saved.live_guesses == [_pair(c, 2, 3)]


def test_confirmed_booth_pair_clears_map_and_rounds():
    c = gen_contestants(6)
    strategy = BruteForceStrategy(c)
    guess = strategy.ceremony_pairs()
    assert guess == [_pair(c, 0, 1), _pair(c, 2, 3), _pair(c, 4, 5)]
    strategy.ceremony_feedback(2, guess)

    strategy.booth_feedback(Correct(_pair(c, 0, 1)))

    poss = strategy.possibilities
    assert poss.is_excluded(c[0], c[1]) is False
    for other in c[2:]:
        assert c[0] not in poss.candidates(other)
        assert c[1] not in poss.candidates(other)
    assert len(strategy.round_manager) == 1
    for saved in strategy.round_manager:
        assert saved.num_correct == 1
        for pair in saved.live_guesses:
            assert not pair.contains(c[0])
            assert not pair.contains(c[1])


def test_booth_feedback_rejects_unknown_answers():
    strategy = BruteForceStrategy(gen_contestants(4))
    with pytest.raises(TypeError):
        strategy.booth_feedback("maybe")


def test_solves_small_game_with_traced_events():
    c = gen_contestants(4)
    game = GameMaster.from_pairs([_pair(c, 0, 2), _pair(c, 1, 3)])
    trail = AuditTrail(game_id="traced")
    strategy = BruteForceStrategy(c, observer=trail)

    while not strategy.is_solved:
        guess = strategy.ceremony_pairs()
        strategy.ceremony_feedback(game.ceremony(guess), guess)
        if strategy.is_solved:
            break
        strategy.booth_feedback(game.truth_booth(strategy.send_to_booth()))

    assert game.is_solution(strategy.perfect_matches)
    assert trail.verbs() == [
        audit.CEREMONY_PROPOSED,
        audit.CEREMONY_FEEDBACK,
        audit.PAIRS_EXCLUDED,
        audit.BOOTH_PROPOSED,
        audit.BOOTH_FEEDBACK,
        audit.MATCH_CONFIRMED,
        audit.CEREMONY_PROPOSED,
        audit.CEREMONY_FEEDBACK,
        audit.ROUND_RECORDED,
        audit.BOOTH_PROPOSED,
        audit.BOOTH_FEEDBACK,
        audit.MATCH_CONFIRMED,
        audit.ROUNDS_PRUNED,
    ]


def test_observer_does_not_change_guesses():
    c = gen_contestants(8)
    game_pairs = [_pair(c, 0, 5), _pair(c, 1, 7), _pair(c, 2, 4), _pair(c, 3, 6)]

    def play(observer):
        game = GameMaster.from_pairs(game_pairs)
        strategy = BruteForceStrategy(c, observer=observer)
        seen = []
        while not strategy.is_solved:
            guess = strategy.ceremony_pairs()
            seen.append([pair.key() for pair in guess])
            strategy.ceremony_feedback(game.ceremony(guess), guess)
            if strategy.is_solved:
                break
            pair = strategy.send_to_booth()
            seen.append(pair.key())
            strategy.booth_feedback(game.truth_booth(pair))
        return seen

    assert play(None) == play(AuditTrail())


def test_contestants_reported_sorted():
    c = gen_contestants(4)
    strategy = BruteForceStrategy(list(reversed(c)))
    assert strategy.contestants == c
    assert contestants_to_pairs(strategy.contestants) == [_pair(c, 0, 1), _pair(c, 2, 3)]


def test_resolve_strategy():
    assert resolve_strategy("brute_force") is BruteForceStrategy
    with pytest.raises(KeyError):
        resolve_strategy("no_such_strategy")
