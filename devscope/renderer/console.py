from rich.console import Console, Group
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from devscope.renderer.manifest import ALL_LANGUAGES, RenderManifest

TIER_STYLES = {"High": "green", "Medium": "yellow", "Low": "red"}


def _score_style(score: float) -> str:
    if score >= 90:
        return "bold green"
    if score >= 75:
        return "bold cyan"
    if score >= 50:
        return "bold yellow"
    return "bold red"


def render_to_console(console: Console, manifest: RenderManifest, language: str = ALL_LANGUAGES, sort_by: str = "score"):
    profile = manifest.data.profile
    stats = manifest.data.stats
    assessment = manifest.assessment

    # Header
    header = Text()
    header.append(f"{profile.name or profile.login}", style="bold green")
    header.append(f"  @{profile.login}\n", style="cyan")
    if profile.bio:
        header.append(f"{profile.bio}\n", style="italic")
    details = " · ".join(x for x in (profile.location, profile.company, profile.blog) if x)
    if details:
        header.append(details + "\n", style="dim")
    header.append(
        f"Repos {profile.public_repos} | Followers {profile.followers} | Following {profile.following}\n"
        f"Contributions {stats.total} | Longest streak {stats.longest_streak}d | Current streak {stats.current_streak}d"
    )
    console.print(Panel(header, title="Profile"))

    # Assessment
    console.print(Panel(
        Group(
            Text(f"{assessment.profile_score:.0f}/100  {assessment.professional_persona}", style=_score_style(assessment.profile_score)),
            Markdown(assessment.profile_summary),
            Text(assessment.overall_impression, style="italic"),
            Text("Skills: " + ", ".join(assessment.technical_skills), style="magenta"),
        ),
        title="Assessment",
    ))
    console.print(Panel(Markdown(assessment.career_advice), title="Strategic Growth Advice"))

    if manifest.language_distribution:
        langs = ", ".join(f"{s.name} ({s.value})" for s in manifest.language_distribution)
        console.print(f"[bold]Languages:[/bold] {langs}")

    # Repositories
    cards = manifest.cards(language=language, sort_by=sort_by)
    if not cards:
        console.print("[yellow]No repositories match the selected filter.[/yellow]")
        return

    table = Table(title=f"Repositories (sorted by {sort_by}, language: {language})", show_lines=True)
    table.add_column("Repository", style="bold")
    table.add_column("Score", justify="right")
    table.add_column("Tier")
    table.add_column("Lang")
    table.add_column("★", justify="right")
    table.add_column("Summary / Suggestions")

    for card in cards:
        ra, repo = card.analysis, card.repo
        notes = ra.summary
        if ra.suggestions:
            notes += "\n" + "\n".join(f"→ {s}" for s in ra.suggestions)
        table.add_row(
            ra.name,
            Text(f"{ra.score:.0f}", style=_score_style(ra.score)),
            Text(ra.completeness, style=TIER_STYLES.get(ra.completeness, "")),
            (repo.language if repo else None) or "-",
            str(repo.stargazers_count) if repo else "-",
            notes,
        )
    console.print(table)
