import argparse
import asyncio
import logging
import sys
from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt
from devscope.agent.assistant import AssistantSession
from devscope.config import get_default_model
from devscope.errors import DevscopeError
from devscope.probes.github import GithubProbe, extract_username
from devscope.refinery.engine import assess_profile
from devscope.renderer.console import render_to_console
from devscope.renderer.engine import render_to_html
from devscope.renderer.manifest import ALL_LANGUAGES, SORT_OPTIONS, create_manifest

console = Console()

EXIT_WORDS = ("exit", "quit")


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


async def chat_loop(session: AssistantSession):
    """
    Reads questions until exit/EOF and streams each answer as it arrives.
    """
    console.print(f"[bold blue]Assistant:[/bold blue] {session.greeting}")
    console.print("[dim]Type 'exit' to leave.[/dim]")
    while True:
        try:
            question = await asyncio.to_thread(Prompt.ask, "[bold cyan]You[/bold cyan]", console=console)
        except (EOFError, KeyboardInterrupt):
            break
        question = question.strip()
        if not question:
            continue
        if question.lower() in EXIT_WORDS:
            break

        console.print("[bold blue]Assistant:[/bold blue] ", end="")
        async for delta in session.send(question):
            console.print(delta, end="", markup=False, highlight=False)
        console.print()


def main():
    parser = argparse.ArgumentParser(description="Devscope: GitHub profile assessment")
    parser.add_argument("username", help="GitHub username or profile URL")
    parser.add_argument("--token", help="GitHub Personal Access Token (optional, overrides env)", default=None)
    parser.add_argument("--model", help="LLM model to use", default=get_default_model())
    parser.add_argument("--output", help="Also write an HTML report to this path", default=None)
    parser.add_argument("--sort", choices=SORT_OPTIONS, default="score", help="Order of the repository cards")
    parser.add_argument("--language", default=ALL_LANGUAGES, help="Only show repositories in this language")
    parser.add_argument("--no-chat", action="store_true", help="Skip the interactive follow-up chat")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args()
    configure_logging(args.verbose)

    handle = extract_username(args.username)
    if not handle:
        console.print("[red]Please enter a valid GitHub username or URL.[/red]")
        sys.exit(1)

    console.print(f"[bold blue]Devscope[/bold blue] - Targeting: [cyan]{handle}[/cyan] | Model: [magenta]{args.model}[/magenta]")

    # 1. Fetch GitHub data
    probe = GithubProbe(token=args.token)
    try:
        with console.status("Fetching GitHub profile..."):
            data = probe.fetch_profile(handle)
    except DevscopeError as e:
        console.print(f"[red]GitHub Probe Failed: {e.message}[/red]")
        sys.exit(1)

    # 2. Assess
    try:
        with console.status("Analyzing profile..."):
            assessment = assess_profile(data.profile, data.repositories, model_name=args.model)
    except DevscopeError as e:
        console.print(f"[red]Assessment Failed: {e.message}[/red]")
        sys.exit(1)

    # 3. Render
    manifest = create_manifest(data, assessment)
    render_to_console(console, manifest, language=args.language, sort_by=args.sort)
    if args.output:
        render_to_html(manifest, args.output, language=args.language, sort_by=args.sort)
        console.print(f"[bold green]Report Generated: {args.output}[/bold green]")

    if args.no_chat:
        return

    # 4. Follow-up chat
    try:
        session = AssistantSession.open(data.profile, assessment, model_name=args.model)
    except DevscopeError as e:
        console.print(f"[yellow]Assistant unavailable: {e.message}[/yellow]")
        return
    asyncio.run(chat_loop(session))


if __name__ == "__main__":
    main()
