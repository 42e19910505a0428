"""Markdown match summary writer."""

from pathlib import Path

from rebound.logging.match_log import MatchLog
from rebound.simulation.config import GameMode, MatchConfig
from rebound.simulation.core.entities import Side


_TITLES = {
    "win": "You Won!",
    "loss": "You Lost",
    "draw": "It's a Draw!",
}


class MarkdownMatchWriter:
    """Generates markdown match summaries."""

    def write_match_summary(self, config: MatchConfig, match_log: MatchLog, output_path: Path) -> None:
        """Write the summary to `output_path`."""
        with open(output_path, "w") as f:
            f.write(self.generate_summary_string(config, match_log))

    def generate_summary_string(self, config: MatchConfig, match_log: MatchLog) -> str:
        """Generate markdown summary as a string."""
        lines = []

        title = _TITLES.get(match_log.outcome or "", "Match in progress")
        if config.mode == GameMode.TIMED_SCORE and match_log.outcome == "win":
            score = match_log.final_scores.get(Side.PLAYER.value, 0)
            if score > config.high_score:
                title = "New High Score!"

        lines.append(f"# {match_log.player_name} vs {match_log.cpu_name}")
        lines.append("")
        lines.append(f"**{title}**")
        lines.append("")
        lines.append(
            f"Mode: {config.mode.value} | Difficulty: {config.difficulty.value} | "
            f"Multi-ball: {'on' if config.multi_ball else 'off'}"
        )
        lines.append("")

        # Result
        lines.append("## Result")
        lines.append("")
        if config.mode == GameMode.TIMED_SCORE:
            lines.append(
                f"Your Score: {match_log.final_scores.get('player', 0)} | "
                f"{match_log.cpu_name}'s Score: {match_log.final_scores.get('cpu', 0)}"
            )
        else:
            lines.append(
                f"Lives left: {match_log.player_name} {match_log.final_lives.get('player', 0)} | "
                f"{match_log.cpu_name} {match_log.final_lives.get('cpu', 0)}"
            )
        lines.append("")
        lines.append(f"- Longest rally: {match_log.longest_rally:.1f}s")
        lines.append(f"- Fastest ball: {match_log.fastest_ball:.0f}")
        lines.append(f"- Wall bounces: {match_log.wall_hits}")
        lines.append("")

        # Stats
        lines.append("## Stats")
        lines.append("")
        lines.append(f"| | {match_log.player_name} | {match_log.cpu_name} |")
        lines.append("|---|---|---|")
        player = match_log.stats[Side.PLAYER]
        cpu = match_log.stats[Side.CPU]
        lines.append(f"| Points won | {player.points_won} | {cpu.points_won} |")
        lines.append(f"| Paddle hits | {player.paddle_hits} | {cpu.paddle_hits} |")
        lines.append(f"| Power hits | {player.power_hits} | {cpu.power_hits} |")
        lines.append(f"| Power hit rate | {player.power_hit_rate:.0%} | {cpu.power_hit_rate:.0%} |")
        lines.append(f"| Block saves | {player.block_hits} | {cpu.block_hits} |")
        lines.append(f"| Lives lost | {player.lives_lost} | {cpu.lives_lost} |")
        lines.append("")

        if player.sacrifices:
            lines.append(f"Sacrifices: {', '.join(player.sacrifices)}")
            lines.append("")

        # Log
        lines.append("## Match Log")
        lines.append("")
        for entry in match_log.entries:
            lines.append(f"- `{entry.time:6.2f}s` {entry.description or entry.event_type}")
        lines.append("")

        return "\n".join(lines)
