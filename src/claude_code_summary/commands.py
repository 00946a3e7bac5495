"""Report commands.

Every command loads its data once, then renders it for the context's
output mode. Errors that should abort the command are raised as
ReportError subclasses and reported by the CLI.
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from rich.text import Text

from claude_code_summary.config import DEFAULTS
from claude_code_summary.errors import ProjectsRootError, ReportError, StatsCacheError
from claude_code_summary.render import terminal as tui
from claude_code_summary.render.context import ReportContext
from claude_code_summary.render.json_output import write_json
from claude_code_summary.render.markdown import md_bullet, md_header, md_table
from claude_code_summary.services.history import load_history
from claude_code_summary.services.jsonl_parser import format_rfc3339, parse_timestamp
from claude_code_summary.services.session_detail import parse_session_detail
from claude_code_summary.services.session_index import SessionIndexResolver
from claude_code_summary.services.stats_aggregator import compute_stats
from claude_code_summary.services.stats_cache import StatsCacheStore
from claude_code_summary.types.sessions import Project, SessionEntry
from claude_code_summary.types.stats import ModelUsage, StatsCache
from claude_code_summary.utils.formatting import (
    format_duration,
    format_number,
    format_tokens,
    model_short,
    relative_time,
    short_id,
    truncate,
)
from claude_code_summary.utils.periods import Period, period_window

logger = logging.getLogger(__name__)


def _load_stats(ctx: ReportContext) -> StatsCache:
    try:
        return StatsCacheStore(ctx.settings.stats_cache_path).load()
    except StatsCacheError as e:
        raise StatsCacheError(f"loading stats cache: {e}") from e


def _resolver(ctx: ReportContext) -> SessionIndexResolver:
    return SessionIndexResolver(ctx.settings.projects_dir)


def _sorted_models(stats: StatsCache) -> list[tuple[str, ModelUsage]]:
    return sorted(stats.model_usage.items(), key=lambda kv: (-kv[1].output_tokens, kv[0]))


def _created_relative(ctx: ReportContext, created: str) -> str:
    ts = parse_timestamp(created)
    return relative_time(ts, now=ctx.current_time()) if ts is not None else ""


# ----------------------------------------------------------------------
# summary
# ----------------------------------------------------------------------

def _summary_payload(ctx: ReportContext, stats: StatsCache) -> dict[str, Any]:
    today = ctx.current_time().strftime("%Y-%m-%d")
    first = parse_timestamp(stats.first_session_date)
    today_stats = stats.find_day(today)

    hours = sorted(
        ((int(h), c) for h, c in stats.hour_counts.items() if h.isdigit()),
        key=lambda hc: (-hc[1], hc[0]),
    )[:DEFAULTS["summary/peakHours"]]

    longest = None
    if stats.longest_session.session_id:
        longest = stats.longest_session.to_dict()

    return {
        "firstSessionDate": first.strftime("%Y-%m-%d") if first else stats.first_session_date,
        "lastComputedDate": stats.last_computed_date,
        "stale": stats.last_computed_date != today,
        "today": today,
        "overview": {
            "sessions": stats.total_sessions,
            "messages": stats.total_messages,
            "inputTokens": sum(u.input_tokens for u in stats.model_usage.values()),
            "outputTokens": sum(u.output_tokens for u in stats.model_usage.values()),
            "cacheReadTokens": sum(u.cache_read_input_tokens for u in stats.model_usage.values()),
        },
        "todayActivity": today_stats.to_dict() if today_stats else None,
        "models": [
            {
                "model": name,
                "name": model_short(name),
                "outputTokens": usage.output_tokens,
                "cacheReadTokens": usage.cache_read_input_tokens,
            }
            for name, usage in _sorted_models(stats)
        ],
        "peakHours": [{"hour": h, "sessions": c} for h, c in hours],
        "longestSession": longest,
    }


def summary(ctx: ReportContext):
    stats = _load_stats(ctx)
    data = _summary_payload(ctx, stats)

    if ctx.is_json:
        write_json(ctx.out, data)
    elif ctx.is_markdown:
        _summary_md(ctx, data)
    else:
        _summary_terminal(ctx, data)


def _summary_terminal(ctx: ReportContext, data: dict[str, Any]):
    console = ctx.console
    overview = data["overview"]
    tui.title(
        console,
        "Claude Code Summary",
        f"Tracking since {data['firstSessionDate']} (last updated: {data['lastComputedDate']})",
    )
    if data["stale"]:
        console.print(Text.assemble(
            ("⚠", "yellow"),
            f" Stats last computed on {data['lastComputedDate']} (today: {data['today']})."
            " Run `ccs refresh` to update.",
        ))
        console.print()

    tui.section(console, "Overview", tui.key_values([
        ("Sessions", tui.bold(format_number(overview["sessions"]))),
        ("Messages", tui.bold(format_number(overview["messages"]))),
        ("Tokens out", tui.bold(format_tokens(overview["outputTokens"]))),
        ("Cache read", tui.bold(format_tokens(overview["cacheReadTokens"]))),
    ]))

    day = data["todayActivity"]
    if day:
        body = tui.key_values([
            ("Sessions", tui.bold(format_number(day["sessionCount"]))),
            ("Messages", tui.bold(format_number(day["messageCount"]))),
            ("Tool calls", tui.bold(format_number(day["toolCallCount"]))),
        ])
    else:
        body = tui.dim("No activity recorded for today")
    tui.section(console, "Today", body)

    if data["models"]:
        tui.section(console, "Models", tui.key_values(
            (m["name"], Text(
                f"out: {format_tokens(m['outputTokens']):<10}  "
                f"cache: {format_tokens(m['cacheReadTokens'])}"
            ))
            for m in data["models"]
        ))

    if data["peakHours"]:
        top = data["peakHours"][0]["sessions"]
        tui.section(console, "Peak Hours", tui.key_values(
            (f"{h['hour']:02d}:00", Text.assemble(
                tui.bar(h["sessions"], top, 20), f" {h['sessions']} sessions",
            ))
            for h in data["peakHours"]
        ))

    longest = data["longestSession"]
    if longest:
        tui.section(console, "Longest Session", tui.key_values([
            ("ID", tui.dim(short_id(longest["sessionId"]))),
            ("Duration", tui.bold(format_duration(longest["duration"]))),
            ("Messages", tui.bold(format_number(longest["messageCount"]))),
        ]))


def _summary_md(ctx: ReportContext, data: dict[str, Any]):
    out = ctx.out
    overview = data["overview"]
    md_header(out, 2, "Claude Code Summary")
    out.write(
        f"Tracking since {data['firstSessionDate']} "
        f"(last updated: {data['lastComputedDate']})\n\n"
    )
    if data["stale"]:
        out.write(
            f"> Stats last computed on {data['lastComputedDate']} "
            f"(today: {data['today']})\n\n"
        )

    md_header(out, 3, "Overview")
    md_bullet(out, "Sessions", format_number(overview["sessions"]))
    md_bullet(out, "Messages", format_number(overview["messages"]))
    md_bullet(out, "Tokens out", format_tokens(overview["outputTokens"]))
    md_bullet(out, "Cache read", format_tokens(overview["cacheReadTokens"]))
    out.write("\n")

    md_header(out, 3, "Today")
    day = data["todayActivity"]
    if day:
        md_bullet(out, "Sessions", format_number(day["sessionCount"]))
        md_bullet(out, "Messages", format_number(day["messageCount"]))
        md_bullet(out, "Tool calls", format_number(day["toolCallCount"]))
        out.write("\n")
    else:
        out.write("No activity recorded for today.\n\n")

    if data["models"]:
        md_header(out, 3, "Models")
        md_table(out, ["Model", "Output", "Cache read"], [
            [m["name"], format_tokens(m["outputTokens"]), format_tokens(m["cacheReadTokens"])]
            for m in data["models"]
        ])

    if data["peakHours"]:
        md_header(out, 3, "Peak Hours")
        md_table(out, ["Hour", "Sessions"], [
            [f"{h['hour']:02d}:00", str(h["sessions"])] for h in data["peakHours"]
        ])

    longest = data["longestSession"]
    if longest:
        md_header(out, 3, "Longest Session")
        md_bullet(out, "ID", short_id(longest["sessionId"]))
        md_bullet(out, "Duration", format_duration(longest["duration"]))
        md_bullet(out, "Messages", format_number(longest["messageCount"]))
        out.write("\n")


# ----------------------------------------------------------------------
# today / week / month
# ----------------------------------------------------------------------

def _session_row(s: SessionEntry) -> dict[str, Any]:
    return {
        "sessionId": s.session_id,
        "messages": s.message_count,
        "created": s.created,
        "firstPrompt": s.first_prompt,
    }


def period_payload(
    ctx: ReportContext,
    stats: StatsCache,
    period: Period | str,
    sessions: Optional[list[SessionEntry]] = None,
) -> dict[str, Any]:
    """Activity, output tokens and sessions from the start of a period on."""
    window = period_window(period, now=ctx.current_time())

    days = [d for d in stats.daily_activity if window.contains_date(d.date)]
    tokens_by_model: dict[str, int] = {}
    for day_tokens in stats.daily_model_tokens:
        if window.contains_date(day_tokens.date):
            for model, tokens in day_tokens.tokens_by_model.items():
                tokens_by_model[model] = tokens_by_model.get(model, 0) + tokens

    if sessions is None:
        try:
            sessions = _resolver(ctx).list_sessions_after(window.start)
        except ProjectsRootError as e:
            logger.info("No session listing for %s: %s", window.period.value, e)
            sessions = []

    short_tokens: dict[str, int] = {}
    for model, tokens in sorted(tokens_by_model.items(), key=lambda kv: (-kv[1], kv[0])):
        name = model_short(model)
        short_tokens[name] = short_tokens.get(name, 0) + tokens

    return {
        "period": window.period.value,
        "title": window.period.title,
        "since": window.start_date,
        "activity": {
            "sessions": sum(d.session_count for d in days),
            "messages": sum(d.message_count for d in days),
            "toolCalls": sum(d.tool_call_count for d in days),
        },
        "tokens": short_tokens,
        "days": [
            {
                "date": d.date,
                "messages": d.message_count,
                "sessions": d.session_count,
                "toolCalls": d.tool_call_count,
            }
            for d in days
        ],
        "sessions": [_session_row(s) for s in sessions],
    }


def period_report(ctx: ReportContext, period: Period | str):
    stats = _load_stats(ctx)
    data = period_payload(ctx, stats, period)

    if ctx.is_json:
        payload = {k: v for k, v in data.items() if k != "title"}
        write_json(ctx.out, payload)
    elif ctx.is_markdown:
        _period_md(ctx, data)
    else:
        _period_terminal(ctx, data)


def _period_terminal(ctx: ReportContext, data: dict[str, Any]):
    console = ctx.console
    activity = data["activity"]
    tui.title(console, data["title"], f"Since {data['since']}")

    rows = [
        ("Sessions", tui.bold(format_number(activity["sessions"]))),
        ("Messages", tui.bold(format_number(activity["messages"]))),
        ("Tool calls", tui.bold(format_number(activity["toolCalls"]))),
    ]
    if activity["sessions"] > 0:
        avg = activity["messages"] // activity["sessions"]
        rows.append(("Avg/session", Text.assemble(tui.bold(format_number(avg)), " msgs")))
    tui.section(console, "Activity", tui.key_values(rows))

    if data["tokens"]:
        tui.section(console, "Tokens (output)", tui.key_values(
            (name, tui.bold(format_tokens(tokens))) for name, tokens in data["tokens"].items()
        ))

    days = data["days"]
    if len(days) > 1:
        top = max(d["messages"] for d in days)
        tui.section(console, "Daily Breakdown", tui.key_values(
            (d["date"], Text.assemble(
                tui.bar(d["messages"], top, 20),
                f" {format_number(d['messages'])} msgs, {d['sessions']} sessions",
            ))
            for d in days
        ))

    sessions = data["sessions"]
    if sessions:
        limit = DEFAULTS["period/sessionLimit"]
        lines = Text()
        for s in sessions[:limit]:
            lines.append(short_id(s["sessionId"]), style="dim")
            lines.append(f"  {s['messages']:3d} msgs  "
                         f"{_created_relative(ctx, s['created']):<10}  ")
            _append_prompt(lines, s["firstPrompt"], DEFAULTS["truncate/periodPrompt"])
            lines.append("\n")
        if len(sessions) > limit:
            lines.append(f"... and {len(sessions) - limit} more\n", style="dim")
        lines.rstrip()
        tui.section(console, "Sessions", lines)


def _period_md(ctx: ReportContext, data: dict[str, Any]):
    out = ctx.out
    activity = data["activity"]
    md_header(out, 2, data["title"])
    out.write(f"Since {data['since']}\n\n")

    md_header(out, 3, "Activity")
    md_bullet(out, "Sessions", format_number(activity["sessions"]))
    md_bullet(out, "Messages", format_number(activity["messages"]))
    md_bullet(out, "Tool calls", format_number(activity["toolCalls"]))
    if activity["sessions"] > 0:
        avg = activity["messages"] // activity["sessions"]
        md_bullet(out, "Avg/session", f"{format_number(avg)} msgs")
    out.write("\n")

    if data["tokens"]:
        md_header(out, 3, "Tokens (output)")
        md_table(out, ["Model", "Tokens"], [
            [name, format_tokens(tokens)] for name, tokens in data["tokens"].items()
        ])

    days = data["days"]
    if len(days) > 1:
        md_header(out, 3, "Daily Breakdown")
        md_table(out, ["Date", "Messages", "Sessions"], [
            [d["date"], format_number(d["messages"]), str(d["sessions"])] for d in days
        ])

    sessions = data["sessions"]
    if sessions:
        limit = DEFAULTS["period/sessionLimit"]
        md_header(out, 3, "Sessions")
        md_table(out, ["ID", "Messages", "Created", "Prompt"], [
            [
                short_id(s["sessionId"]),
                str(s["messages"]),
                _created_relative(ctx, s["created"]),
                truncate(s["firstPrompt"], DEFAULTS["truncate/periodPrompt"]) or "(no prompt)",
            ]
            for s in sessions[:limit]
        ])
        if len(sessions) > limit:
            out.write(f"... and {len(sessions) - limit} more\n\n")


def _append_prompt(text: Text, prompt: str, width: int):
    prompt = truncate(prompt, width)
    if prompt:
        text.append(prompt)
    else:
        text.append("(no prompt)", style="dim")


# ----------------------------------------------------------------------
# projects
# ----------------------------------------------------------------------

def _load_projects(ctx: ReportContext) -> list[Project]:
    try:
        projects = _resolver(ctx).list_projects()
    except ProjectsRootError as e:
        raise ProjectsRootError(f"loading projects: {e}") from e
    projects.sort(key=lambda p: (-p.message_count, p.dir_name))
    return projects


def _projects_payload(projects: list[Project]) -> list[dict[str, Any]]:
    return [
        {
            "path": p.path or p.dir_name,
            "sessions": p.session_count,
            "messages": p.message_count,
            "lastActive": format_rfc3339(p.last_active) if p.last_active else "",
        }
        for p in projects
    ]


def projects(ctx: ReportContext):
    found = _load_projects(ctx)

    if ctx.is_json:
        write_json(ctx.out, _projects_payload(found))
        return

    now = ctx.current_time()
    if ctx.is_markdown:
        out = ctx.out
        md_header(out, 2, "Projects")
        out.write(f"Found {len(found)} projects with activity\n\n")
        if not found:
            out.write("No projects found.\n\n")
            return
        md_table(out, ["Project", "Sessions", "Messages", "Last Active"], [
            [
                p.path or p.dir_name,
                str(p.session_count),
                format_number(p.message_count),
                relative_time(p.last_active, now=now),
            ]
            for p in found
        ])
        return

    console = ctx.console
    tui.title(console, "Projects", f"Found {len(found)} projects with activity")
    if not found:
        console.print(tui.dim("No projects found"))
        return

    top = found[0].message_count
    for p in found:
        console.print(Text.assemble(
            "  ",
            tui.bar(p.message_count, top, 15),
            f" {format_number(p.message_count) + ' msgs':<10}  {p.session_count:3d} sessions  ",
            tui.dim(f"{relative_time(p.last_active, now=now):<10}"),
            "  ",
            Text(p.path or p.dir_name, style="bold"),
        ))
    console.print()


# ----------------------------------------------------------------------
# sessions
# ----------------------------------------------------------------------

def _load_sessions(ctx: ReportContext, project: str) -> list[SessionEntry]:
    try:
        return _resolver(ctx).list_sessions(project)
    except ProjectsRootError as e:
        raise ProjectsRootError(f"loading sessions: {e}") from e


def _sessions_payload(found: list[SessionEntry], limit: int) -> list[dict[str, Any]]:
    rows = []
    for s in found[:max(limit, 0)]:
        row = _session_row(s)
        if s.git_branch:
            row["branch"] = s.git_branch
        if s.is_sidechain:
            row["sidechain"] = True
        rows.append(row)
    return rows


def sessions(ctx: ReportContext, project: str = "", limit: Optional[int] = None):
    if limit is None:
        limit = DEFAULTS["sessions/limit"]
    found = _load_sessions(ctx, project)

    if ctx.is_json:
        write_json(ctx.out, _sessions_payload(found, limit))
        return

    heading = f"Sessions for {project}" if project else "Recent Sessions"
    shown = found[:max(limit, 0)]
    width = DEFAULTS["truncate/sessionPrompt"]

    if ctx.is_markdown:
        out = ctx.out
        md_header(out, 2, heading)
        out.write(f"Total: {len(found)} sessions\n\n")
        if not found:
            out.write("No sessions found.\n\n")
            return
        md_table(out, ["ID", "Messages", "Created", "Prompt", "Branch"], [
            [
                short_id(s.session_id),
                str(s.message_count),
                _created_relative(ctx, s.created),
                (truncate(s.first_prompt, width) or "(no prompt)")
                + (" [sidechain]" if s.is_sidechain else ""),
                s.git_branch,
            ]
            for s in shown
        ])
        if len(found) > len(shown):
            out.write(f"Showing {len(shown)} of {len(found)}. Use -n to see more.\n\n")
        return

    console = ctx.console
    tui.title(console, heading, f"Total: {len(found)} sessions")
    if not found:
        console.print(tui.dim("No sessions found"))
        return

    for s in shown:
        line = Text("  ")
        line.append(short_id(s.session_id), style="dim")
        line.append(f"  {s.message_count:3d} msgs  {_created_relative(ctx, s.created):<10}  ")
        _append_prompt(line, s.first_prompt, width)
        if s.is_sidechain:
            line.append(" [sidechain]", style="yellow")
        if s.git_branch:
            line.append(f" ({s.git_branch})", style="dim")
        console.print(line)

    if len(found) > len(shown):
        console.print()
        console.print(tui.dim(f"  Showing {len(shown)} of {len(found)}. Use -n to see more."))
    console.print()


# ----------------------------------------------------------------------
# session <id>
# ----------------------------------------------------------------------

def session_detail(ctx: ReportContext, id_prefix: str):
    lookup = _resolver(ctx).find_session(id_prefix)
    try:
        detail = parse_session_detail(lookup.path)
    except (OSError, ReportError) as e:
        raise ReportError(f"parsing session: {e}") from e

    entry = lookup.entry
    project_path = entry.project_path if entry is not None else ""
    duration_ms = 0
    if detail.started_at is not None and detail.ended_at is not None:
        duration_ms = (detail.ended_at - detail.started_at) // timedelta(milliseconds=1)
    tools = sorted(detail.tools.items(), key=lambda kv: (-kv[1], kv[0]))
    prompts = [m for m in detail.messages if m.role == "user" and m.content]

    if ctx.is_json:
        write_json(ctx.out, {
            "sessionId": detail.id,
            "path": lookup.path,
            "project": project_path,
            "branch": detail.git_branch,
            "version": detail.version,
            "sidechain": detail.is_sidechain,
            "model": detail.model,
            "startedAt": format_rfc3339(detail.started_at) if detail.started_at else "",
            "endedAt": format_rfc3339(detail.ended_at) if detail.ended_at else "",
            "duration": duration_ms,
            "messages": {
                "total": detail.total_messages,
                "user": detail.user_messages,
                "assistant": detail.assistant_messages,
            },
            "tokens": {"input": detail.input_tokens, "output": detail.output_tokens},
            "tools": dict(tools),
            "prompts": [
                {
                    "timestamp": format_rfc3339(m.timestamp) if m.timestamp else "",
                    "text": m.content,
                }
                for m in prompts
            ],
        })
        return

    shown = prompts[:DEFAULTS["session/promptsShown"]]
    width = DEFAULTS["truncate/detailPrompt"]

    if ctx.is_markdown:
        out = ctx.out
        md_header(out, 2, "Session Detail")
        md_bullet(out, "ID", detail.id)
        if project_path:
            md_bullet(out, "Project", project_path)
        if detail.git_branch:
            md_bullet(out, "Branch", detail.git_branch)
        if detail.version:
            md_bullet(out, "CLI", f"v{detail.version}")
        if detail.started_at is not None:
            md_bullet(out, "Started", format_rfc3339(detail.started_at))
            md_bullet(out, "Duration", format_duration(duration_ms))
        if detail.model:
            md_bullet(out, "Model", model_short(detail.model))
        if detail.is_sidechain:
            md_bullet(out, "Type", "sidechain")
        out.write("\n")

        md_header(out, 3, "Messages")
        md_bullet(out, "Total", format_number(detail.total_messages))
        md_bullet(out, "User", format_number(detail.user_messages))
        md_bullet(out, "Assistant", format_number(detail.assistant_messages))
        out.write("\n")

        md_header(out, 3, "Tokens")
        md_bullet(out, "Input", format_tokens(detail.input_tokens))
        md_bullet(out, "Output", format_tokens(detail.output_tokens))
        out.write("\n")

        if tools:
            md_header(out, 3, "Tool Usage")
            md_table(out, ["Tool", "Calls"], [[name, str(count)] for name, count in tools])

        md_header(out, 3, "Conversation")
        if not shown:
            out.write("(no user messages)\n\n")
        for m in shown:
            ts = m.timestamp.astimezone(ctx.tz).strftime("%H:%M") + " " if m.timestamp else ""
            out.write(f"- {ts}{truncate(m.content, width)}\n")
        if shown:
            out.write("\n")
        return

    console = ctx.console
    tui.title(console, "Session Detail")

    info = [("ID", tui.bold(detail.id))]
    if project_path:
        info.append(("Project", Text(project_path)))
    if detail.git_branch:
        info.append(("Branch", Text(detail.git_branch)))
    if detail.version:
        info.append(("CLI", tui.dim(f"v{detail.version}")))
    if detail.started_at is not None:
        info.append(("Started", Text(format_rfc3339(detail.started_at))))
    if detail.ended_at is not None:
        info.append(("Duration", tui.bold(format_duration(duration_ms))))
    if detail.model:
        info.append(("Model", tui.bold(model_short(detail.model))))
    if detail.is_sidechain:
        info.append(("Type", Text("sidechain", style="yellow")))
    tui.section(console, "Info", tui.key_values(info))

    tui.section(console, "Messages", tui.key_values([
        ("Total", tui.bold(format_number(detail.total_messages))),
        ("User", Text(format_number(detail.user_messages))),
        ("Assistant", Text(format_number(detail.assistant_messages))),
    ]))

    tui.section(console, "Tokens", tui.key_values([
        ("Input", tui.bold(format_tokens(detail.input_tokens))),
        ("Output", tui.bold(format_tokens(detail.output_tokens))),
    ]))

    if tools:
        top = tools[0][1]
        tui.section(console, "Tool Usage", tui.key_values(
            (Text.assemble(tui.bar(count, top, 15), f" {count:3d}"), Text(name))
            for name, count in tools
        ))

    convo = Text()
    for m in shown:
        if m.timestamp is not None:
            convo.append(m.timestamp.astimezone(ctx.tz).strftime("%H:%M") + " ", style="dim")
        convo.append("▸ ", style="green")
        convo.append(truncate(m.content, width))
        convo.append("\n")
    if len(prompts) > len(shown):
        convo.append("... and more messages\n", style="dim")
    if not shown:
        convo.append("(no user messages)", style="dim")
    convo.rstrip()
    tui.section(console, "Conversation", convo)


# ----------------------------------------------------------------------
# tokens
# ----------------------------------------------------------------------

def _tokens_payload(stats: StatsCache) -> dict[str, Any]:
    days = stats.daily_model_tokens[-DEFAULTS["tokens/days"]:]
    return {
        "models": [
            {"model": name, "name": model_short(name), **usage.to_dict()}
            for name, usage in _sorted_models(stats)
        ],
        "daily": [{"date": d.date, "outputTokens": d.total} for d in days],
    }


def tokens(ctx: ReportContext):
    stats = _load_stats(ctx)
    data = _tokens_payload(stats)

    if ctx.is_json:
        write_json(ctx.out, data)
        return

    heading = f"Daily Output Tokens (last {DEFAULTS['tokens/days']} days)"

    if ctx.is_markdown:
        out = ctx.out
        md_header(out, 2, "Token Usage")
        md_header(out, 3, "By Model")
        md_table(out, ["Model", "Input", "Output", "Cache read", "Cache creation"], [
            [
                m["name"],
                format_tokens(m["inputTokens"]),
                format_tokens(m["outputTokens"]),
                format_tokens(m["cacheReadInputTokens"]),
                format_tokens(m["cacheCreationInputTokens"]),
            ]
            for m in data["models"]
        ])
        md_header(out, 3, heading)
        md_table(out, ["Date", "Output"], [
            [d["date"], format_tokens(d["outputTokens"])] for d in data["daily"]
        ])
        return

    console = ctx.console
    tui.title(console, "Token Usage")

    by_model = Text()
    for m in data["models"]:
        by_model.append(m["name"] + "\n", style="bold white")
        by_model.append(f"  Input tokens     {format_tokens(m['inputTokens'])}\n")
        by_model.append("  Output tokens    ")
        by_model.append(format_tokens(m["outputTokens"]) + "\n", style="bold white")
        by_model.append(f"  Cache read       {format_tokens(m['cacheReadInputTokens'])}\n")
        by_model.append(f"  Cache creation   {format_tokens(m['cacheCreationInputTokens'])}\n\n")
    by_model.rstrip()
    tui.section(console, "By Model", by_model if data["models"] else tui.dim("No token usage recorded"))

    top = max((d["outputTokens"] for d in data["daily"]), default=0)
    tui.section(console, heading, tui.key_values(
        (d["date"], Text.assemble(tui.bar(d["outputTokens"], top, 20),
                                  f" {format_tokens(d['outputTokens'])}"))
        for d in data["daily"]
    ))


# ----------------------------------------------------------------------
# history
# ----------------------------------------------------------------------

def history(ctx: ReportContext, limit: Optional[int] = None):
    if limit is None:
        limit = DEFAULTS["history/limit"]
    try:
        entries = load_history(ctx.settings.history_path, limit=limit)
    except (OSError, ReportError) as e:
        raise ReportError(f"loading history: {e}") from e

    # timestamps are epoch milliseconds; 0 means unknown
    stamps = [parse_timestamp(e.timestamp) if e.timestamp else None for e in entries]

    if ctx.is_json:
        write_json(ctx.out, [
            {
                "display": e.display,
                "timestamp": format_rfc3339(ts) if ts else "",
                "project": e.project,
            }
            for e, ts in zip(entries, stamps)
        ])
        return

    now = ctx.current_time()
    width = DEFAULTS["truncate/sessionPrompt"]
    if ctx.is_markdown:
        out = ctx.out
        md_header(out, 2, "Prompt History")
        md_table(out, ["When", "Project", "Prompt"], [
            [relative_time(ts, now=now), e.project, truncate(e.display, width)]
            for e, ts in zip(entries, stamps)
        ])
        return

    console = ctx.console
    tui.title(console, "Prompt History", f"Last {len(entries)} prompts")
    for e, ts in zip(entries, stamps):
        line = Text("  ")
        line.append(f"{relative_time(ts, now=now):<10}", style="dim")
        line.append("  " + truncate(e.display, width))
        if e.project:
            line.append(f"  {e.project}", style="dim")
        console.print(line)
    console.print()


# ----------------------------------------------------------------------
# refresh / all
# ----------------------------------------------------------------------

def refresh(ctx: ReportContext):
    """Rebuild the stats cache from every transcript and write it out."""
    console = ctx.console
    show_progress = not ctx.is_json and not ctx.is_markdown and console.is_terminal

    if not ctx.is_json and not ctx.is_markdown:
        console.print(Text("Refreshing stats cache...", style="bold cyan"))

    def report_progress(done: int, total: int):
        if show_progress:
            ctx.out.write(f"\r  Scanning... {done}/{total} sessions")
            ctx.out.flush()

    try:
        stats = compute_stats(
            ctx.settings.projects_dir,
            progress=report_progress,
            tz=ctx.tz,
            now=ctx.now,
        )
    except ReportError as e:
        raise ReportError(f"computing stats: {e}") from e
    finally:
        if show_progress:
            ctx.out.write("\n")

    try:
        StatsCacheStore(ctx.settings.stats_cache_path).save(stats)
    except StatsCacheError as e:
        raise StatsCacheError(f"saving stats: {e}") from e

    if ctx.is_json:
        write_json(ctx.out, {
            "path": str(ctx.settings.stats_cache_path),
            "lastComputedDate": stats.last_computed_date,
            "totalSessions": stats.total_sessions,
            "totalMessages": stats.total_messages,
        })
        return
    if ctx.is_markdown:
        ctx.out.write(
            f"Stats cache refreshed for {stats.last_computed_date}: "
            f"{format_number(stats.total_sessions)} sessions, "
            f"{format_number(stats.total_messages)} messages\n"
        )
        return

    console.print()
    console.print(Text.assemble(
        "  ",
        ("Done.", "green"),
        " ",
        (format_number(stats.total_sessions), "bold"),
        " sessions, ",
        (format_number(stats.total_messages), "bold"),
        " messages",
    ))
    console.print(Text.assemble("  Cache updated for ", (stats.last_computed_date, "bold")))
    console.print()


def all_reports(ctx: ReportContext):
    """Summary, projects, recent sessions and tokens in one report."""
    if ctx.is_json:
        stats = _load_stats(ctx)
        write_json(ctx.out, {
            "summary": _summary_payload(ctx, stats),
            "projects": _projects_payload(_load_projects(ctx)),
            "sessions": _sessions_payload(_load_sessions(ctx, ""), DEFAULTS["sessions/limit"]),
            "tokens": _tokens_payload(stats),
        })
        return

    summary(ctx)
    ctx.out.write("\n")
    projects(ctx)
    ctx.out.write("\n")
    sessions(ctx)
    ctx.out.write("\n")
    tokens(ctx)
