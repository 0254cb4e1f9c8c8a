from pathlib import Path

from perfectmatch import AuditTrail, BruteForceStrategy, GameRunner, RunConfig
from perfectmatch.kit import load_kit


def main() -> None:
    kit = load_kit(str(Path(__file__).parent / "kits" / "season_1.yaml"))
    game = kit.build_game()
    trail = AuditTrail()
    strategy = BruteForceStrategy(game.contestants(), observer=trail)

    runner = GameRunner(game, strategy, RunConfig(max_iterations=kit.max_iterations, verbose=True))
    result = runner.run()

    for pair in result.perfect_matches:
        print("match:", pair)
    print("iterations:", result.iterations)
    print("solution correct:", game.is_solution(result.perfect_matches))
    print("audit_events:", len(trail.entries))


if __name__ == "__main__":
    main()
