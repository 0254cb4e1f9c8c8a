import pytest

from perfectmatch.gamemaster import GameMaster
from perfectmatch.runner import GameRunner, RunConfig
from perfectmatch.strategy import BruteForceStrategy


class _RecordingOracle:
    """Wraps a game master and checks every query against the strategy state."""

    def __init__(self, game: GameMaster, strategy: BruteForceStrategy):
        self.game = game
        self.strategy = strategy
        self.ceremony_guesses = []
        self.booth_guesses = []
        self.confirmed_counts = []

    def ceremony(self, guess):
        self.ceremony_guesses.append(list(guess))
        self.confirmed_counts.append(len(self.strategy.perfect_matches))
        return self.game.ceremony(guess)

    def truth_booth(self, guess):
        self.booth_guesses.append(guess)
        return self.game.truth_booth(guess)


def _play(n, seed, max_iterations=200):
    game = GameMaster.initialize_game(n, seed=seed)
    strategy = BruteForceStrategy(game.contestants())
    oracle = _RecordingOracle(game, strategy)
    result = GameRunner(oracle, strategy, RunConfig(max_iterations=max_iterations)).run()
    return game, strategy, oracle, result


@pytest.mark.parametrize("n", [4, 8, 12])
@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_game_is_solved_correctly(n, seed):
    game, strategy, _, result = _play(n, seed)

    assert result.solved
    assert result.termination_reason == "solved"
    assert game.is_solution(strategy.perfect_matches)
    assert len(strategy.perfect_matches) == n // 2


@pytest.mark.parametrize("n", [4, 8, 12])
@pytest.mark.parametrize("seed", [0, 1, 2])
def test_every_ceremony_is_a_perfect_pairing(n, seed):
    game, _, oracle, _ = _play(n, seed)
    everyone = set(game.contestants())

    for guess in oracle.ceremony_guesses:
        assert len(guess) == n // 2
        members = [member for pair in guess for member in (pair.a, pair.b)]
        assert len(members) == len(set(members))
        assert set(members) == everyone


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_confirmed_matches_never_shrink(seed):
    _, _, oracle, _ = _play(12, seed)
    counts = oracle.confirmed_counts
    assert counts == sorted(counts)


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_booth_never_repeats_a_pair(seed):
    _, _, oracle, _ = _play(12, seed)
    assert len(oracle.booth_guesses) == len(set(oracle.booth_guesses))


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_possibility_map_stays_symmetric(seed):
    _, strategy, _, _ = _play(8, seed, max_iterations=2)
    snapshot = strategy.possibilities.snapshot()
    for key, candidates in snapshot.items():
        for other in candidates:
            assert key in snapshot[other]


def test_same_seed_same_game():
    _, _, first, first_result = _play(12, 42)
    _, _, second, second_result = _play(12, 42)

    assert [[p.key() for p in g] for g in first.ceremony_guesses] == [
        [p.key() for p in g] for g in second.ceremony_guesses
    ]
    assert first_result.iterations == second_result.iterations
