"""Demo dataset used when local storage holds nothing valid."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from stride_cli.models import Project, ProjectMember, ProjectNote, ProjectTag

_PEOPLE = {
    "AK": ("Alex Kim", "alex.kim@stride.dev", "bg-indigo-500"),
    "MJ": ("Maya Jones", "maya.jones@stride.dev", "bg-violet-500"),
    "RL": ("Ryan Lee", "ryan.lee@stride.dev", "bg-sky-500"),
    "SC": ("Sam Chen", "sam.chen@stride.dev", "bg-emerald-500"),
    "TW": ("Taylor Wu", "taylor.wu@stride.dev", "bg-amber-500"),
}


def _member(member_id: str, initials: str, role: str) -> ProjectMember:
    name, email, color = _PEOPLE[initials]
    return ProjectMember(
        id=member_id, initials=initials, name=name, email=email, color=color, role=role
    )


def _note(note_id: str, initials: str, content: str, created_at: datetime) -> ProjectNote:
    return ProjectNote(
        id=note_id,
        content=content,
        author_name=_PEOPLE[initials][0],
        author_initials=initials,
        created_at=created_at,
    )


def _tags(*items: tuple[str, str, str]) -> tuple[ProjectTag, ...]:
    return tuple(ProjectTag(id=tag_id, label=label, color=color) for tag_id, label, color in items)


def seed_projects(now: datetime | None = None) -> list[Project]:
    """Build the demo projects, with timestamps relative to ``now``."""
    if now is None:
        now = datetime.now(UTC)
    day = timedelta(days=1)

    return [
        Project(
            id="proj-1",
            name="Design System v3",
            description="Rebuilding component library with new silk tokens and glass surfaces.",
            icon_name="Palette",
            progress=72,
            status="on-track",
            color="indigo",
            mode="team",
            members=(
                _member("m1", "AK", "owner"),
                _member("m2", "MJ", "admin"),
                _member("m3", "RL", "editor"),
            ),
            notes=(
                _note("n2", "MJ", "Glass surfaces need a second pass on light mode contrast.", now - day),
                _note("n1", "AK", "Finalised the colour tokens, ready for review.", now - 2 * day),
            ),
            tags=_tags(("t1", "Design", "indigo"), ("t2", "Priority", "rose"), ("t3", "UX", "amber")),
            created_at=now - 30 * day,
            estimated_days=45,
        ),
        Project(
            id="proj-2",
            name="API Gateway",
            description="Rate limiting, auth middleware, and WebSocket proxy layer.",
            icon_name="Shield",
            progress=45,
            status="delayed",
            color="rose",
            mode="team",
            members=(_member("m4", "SC", "owner"), _member("m5", "MJ", "editor")),
            notes=(
                _note("n3", "SC", "WebSocket proxy is blocked until infra migration is done.", now - 3 * day),
            ),
            tags=_tags(("t4", "Backend", "emerald"), ("t5", "Security", "rose"), ("t6", "Feature", "sky")),
            created_at=now - 20 * day,
            estimated_days=60,
        ),
        Project(
            id="proj-3",
            name="Mobile App",
            description="React Native client with offline-first architecture.",
            icon_name="Rocket",
            progress=88,
            status="on-track",
            color="emerald",
            mode="team",
            members=(
                _member("m6", "RL", "owner"),
                _member("m7", "AK", "admin"),
                _member("m8", "TW", "editor"),
                _member("m9", "SC", "viewer"),
            ),
            tags=_tags(("t7", "Mobile", "sky"), ("t8", "Offline", "amber")),
            created_at=now - 50 * day,
            estimated_days=55,
        ),
        Project(
            id="proj-4",
            name="AI Assistant",
            description="LLM-powered copilot for task management and scheduling.",
            icon_name="Sparkles",
            progress=30,
            status="on-track",
            color="amber",
            mode="solo",
            members=(_member("m10", "TW", "owner"),),
            notes=(
                _note(
                    "n4",
                    "TW",
                    "Prompt engineering phase done. Starting integration with the scheduler.",
                    now - day,
                ),
            ),
            tags=_tags(("t9", "AI", "amber"), ("t10", "Feature", "sky")),
            created_at=now - 10 * day,
            estimated_days=40,
        ),
        Project(
            id="proj-5",
            name="Platform Infra",
            description="Kubernetes migration, CI/CD pipelines, and monitoring.",
            icon_name="Layers",
            progress=60,
            status="delayed",
            color="sky",
            mode="team",
            members=(
                _member("m11", "SC", "owner"),
                _member("m12", "MJ", "admin"),
                _member("m13", "AK", "editor"),
            ),
            tags=_tags(("t11", "DevOps", "sky"), ("t12", "Infra", "emerald")),
            created_at=now - 40 * day,
            estimated_days=70,
        ),
    ]
