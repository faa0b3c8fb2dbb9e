"""Markdown formatter for weekly reflections and the insights report."""

from __future__ import annotations

from datetime import date

from wellness_engine.achievements import describe
from wellness_engine.models import InsufficientData, PatternReport, WeeklyReflection
from wellness_engine.snapshot import Snapshot


def format_reflection(reflection: WeeklyReflection, week_ending: date) -> str:
    """Format a WeeklyReflection as Markdown.

    Returns:
        Complete Markdown string with frontmatter.
    """
    r = reflection
    lines: list[str] = []

    # Frontmatter
    lines.append("---")
    lines.append(f"created: {week_ending.isoformat()}")
    lines.append("tags: [log/mood, type/weekly_reflection]")
    lines.append("status: auto_generated")
    lines.append(f"entries: {r.entry_count}")
    lines.append(f"average_mood: {r.average_mood:.2f}")
    lines.append(f"bucket: {r.mood_bucket}")
    lines.append(f"trend: {r.trend}")
    lines.append("---")
    lines.append("")

    lines.append(f"# Weekly Reflection: {week_ending.isoformat()}")
    lines.append("")
    lines.append(r.summary)
    lines.append("")

    lines.append("## Insights")
    if r.insights:
        for insight in r.insights:
            lines.append(f"- {insight}")
    else:
        lines.append("- (none)")
    lines.append("")

    lines.append("## Mood Distribution")
    if r.mood_distribution:
        for label, count in r.mood_distribution.items():
            lines.append(f"- {label}: {count}")
    else:
        lines.append("- (none)")
    lines.append("")

    lines.append("## Top Activities")
    if r.top_activities:
        for activity, count in r.top_activities:
            lines.append(f"- {activity} ({count}x)")
    else:
        lines.append("- (none)")
    lines.append("")

    if r.patterns:
        _format_patterns(lines, r.patterns)

    return "\n".join(lines)


def _format_patterns(lines: list[str], report: PatternReport) -> None:
    """Append themes and activity correlations to lines."""
    lines.append(f"## Patterns ({report.noted_entries} noted entries)")

    lines.append("### Themes")
    if report.themes:
        for t in report.themes:
            lines.append(f"- {t.theme}: {t.match_count}")
    else:
        lines.append("- (none)")

    lines.append("### Mood Boosters")
    if report.activity_correlations:
        for c in report.activity_correlations:
            lines.append(
                f"- {c.activity}: {c.positive_ratio:.0%} positive over {c.occurrences} entries"
            )
    else:
        lines.append("- (none)")

    lines.append("")


def format_report(snapshot: Snapshot) -> str:
    """Full insights report: progress, streak, badges, forecast and reflection."""
    ledger = snapshot.ledger
    as_of = snapshot.local_day
    lines: list[str] = []

    lines.append(f"# Wellness Report: {as_of.isoformat()}")
    lines.append("")

    lines.append("## Progress")
    lines.append(f"- Level {ledger.level} ({ledger.total_points} points)")
    lines.append(f"- {ledger.points_to_next_level} points to level {ledger.level + 1}")
    lines.append(f"- Current streak: {snapshot.streak.current_streak} day(s)")
    lines.append(f"- Longest streak: {snapshot.streak.longest_streak} day(s)")
    lines.append("")

    lines.append("## Badges")
    badges = describe(snapshot.badges)
    if badges:
        for badge in badges:
            lines.append(f"- {badge.name}: {badge.description}")
    else:
        lines.append("- (none)")
    lines.append("")

    lines.append("## Forecast")
    fc = snapshot.forecast
    if isinstance(fc, InsufficientData):
        lines.append(f"(not enough data: {fc.reason})")
    else:
        basis = "weekday/weekend pattern" if fc.weekly_pattern else "recent days"
        lines.append(
            f"Tomorrow looks {fc.predicted.label.lower()} "
            f"({fc.confidence:.0%} confidence, based on {basis})"
        )
    lines.append("")

    reflection = snapshot.reflection
    if isinstance(reflection, InsufficientData):
        lines.append("## This Week")
        lines.append(f"(not enough data: {reflection.reason})")
        lines.append("")
    else:
        lines.append("## This Week")
        lines.append(reflection.summary)
        lines.append("")
        for insight in reflection.insights:
            lines.append(f"- {insight}")
        if reflection.insights:
            lines.append("")

    return "\n".join(lines)
