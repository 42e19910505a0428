"""Entry point for rebound package."""

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table


FRAME_DT = 1 / 60
MAX_FRAMES = 60 * 60 * 15   # 15 simulated minutes


def autopilot(sim) -> None:
    """Stand-in for a human: hold the key toward the closest incoming ball."""
    from rebound.simulation import Direction

    paddle = sim.arena.player
    incoming = [b for b in sim.arena.balls if b.vx < 0]
    target = min(incoming, key=lambda b: b.x).y if incoming else sim.arena.court.center_y
    sim.move(Direction.UP, target < paddle.center - 8)
    sim.move(Direction.DOWN, target > paddle.center + 8)


def main() -> None:
    """Main entry point for the Rebound demo."""
    parser = argparse.ArgumentParser(
        description="Rebound - headless match demo",
        prog="rebound",
    )
    parser.add_argument("--mode", default="survival", help="survival or timed_score (default: survival)")
    parser.add_argument("--difficulty", default="normal", help="easy, normal or hard (default: normal)")
    parser.add_argument("--lives", type=int, default=3, help="Lives per side in survival (default: 3)")
    parser.add_argument("--duration", type=float, default=60, help="Timed-score length in seconds (default: 60)")
    parser.add_argument("--multi-ball", action="store_true", help="Serve three balls per round")
    parser.add_argument(
        "--sacrifice",
        choices=["blocks", "pad", "life", "wait"],
        default="wait",
        help="How the autopilot answers a sacrifice offer (default: wait for the timeout)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible match")
    parser.add_argument("--markdown", type=Path, default=None, help="Write a markdown summary to this path")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from rebound.logging import MarkdownMatchWriter, MatchLog
    from rebound.simulation import EventBus, EventType, MatchSetup

    console = Console()

    setup = (
        MatchSetup()
        .set_mode(args.mode)
        .set_difficulty(args.difficulty)
        .set_lives(args.lives)
        .set_match_duration(args.duration)
        .set_multi_ball(args.multi_ball)
        .set_seed(args.seed)
    )
    config = setup.build()

    bus = EventBus()
    match_log = MatchLog(player_name=config.player_name, cpu_name="Optimus")
    match_log.attach(bus)

    def answer_offer(event) -> None:
        if args.sacrifice != "wait" and args.sacrifice in event.data.get("options", []):
            pending.append(args.sacrifice)

    pending: list[str] = []
    bus.subscribe(EventType.SACRIFICE_OFFERED, answer_offer)

    sim = setup.start_match(event_bus=bus)

    frames = 0
    while not sim.is_over and frames < MAX_FRAMES:
        autopilot(sim)
        sim.update(FRAME_DT)
        if pending:
            sim.choose_sacrifice(pending.pop())
        frames += 1

    snap = sim.snapshot()

    table = Table(title=f"Rebound - {config.mode.value} / {config.difficulty.value}")
    table.add_column("")
    table.add_column(config.player_name, justify="right")
    table.add_column(match_log.cpu_name, justify="right")
    if snap.mode == "survival":
        table.add_row("Lives", str(snap.lives["player"]), str(snap.lives["cpu"]))
    else:
        table.add_row("Score", str(snap.scores["player"]), str(snap.scores["cpu"]))
    for label, attr in (("Paddle hits", "paddle_hits"), ("Power hits", "power_hits"), ("Block saves", "block_hits")):
        table.add_row(
            label,
            str(getattr(match_log.stats[sim.arena.player.side], attr)),
            str(getattr(match_log.stats[sim.arena.cpu.side], attr)),
        )
    console.print(table)
    console.print(
        f"Outcome: [bold]{snap.outcome or 'unfinished'}[/bold]  "
        f"longest rally {snap.telemetry.longest_rally:.1f}s  "
        f"fastest ball {snap.telemetry.fastest_ball:.0f}  "
        f"({frames} frames)"
    )

    if args.markdown:
        MarkdownMatchWriter().write_match_summary(config, match_log, args.markdown)
        console.print(f"Summary written to {args.markdown}")


if __name__ == "__main__":
    main()
