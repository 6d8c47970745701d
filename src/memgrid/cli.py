"""
CLI entry point.

Commands:
- init: Initialize data directory and local schema
- list: Print public memories
- export: Export public memories to the export directory
- shell: Interactive session (sign in, browse, add, export)

Flags:
- --debug: Enable debug logging
"""

import asyncio
import getpass
import logging
import sys

from memgrid.app import Backend, open_backend
from memgrid.auth.base import SessionCell
from memgrid.core.config import Settings, get_settings
from memgrid.core.errors import AuthError, InvalidInput, MemoryGridError, Unauthenticated
from memgrid.core.logging import get_logger, setup_logging
from memgrid.memory.base import Category, Memory, MemoryDraft, Visibility
from memgrid.memory.export import FileExportSink

PREVIEW_LENGTH = 150

SHELL_HELP = """Commands:
  /signup      Create an account
  /login       Sign in
  /logout      Sign out
  /whoami      Show current identity
  /list        Show public memories and, when signed in, your private ones
  /add         Preserve a new memory
  /export      Export visible memories to a JSON file
  /exit        Leave the shell"""


def main() -> int:
    """Main entry point."""
    settings = get_settings()

    debug_mode = "--debug" in sys.argv
    if debug_mode:
        sys.argv.remove("--debug")

    log_level = logging.DEBUG if debug_mode else logging.INFO
    log_file = settings.data_dir / "memgrid.log"
    setup_logging(level=log_level, log_file=log_file, console=debug_mode)
    logger = get_logger("cli")

    if len(sys.argv) < 2:
        print("Usage: memgrid [--debug] <command>")
        print("Commands: init, list, export, shell")
        print("Flags: --debug (verbose logging to console and data/memgrid.log)")
        return 1

    command = sys.argv[1]

    if command == "init":
        return asyncio.run(_init(settings))

    if command == "list":
        return asyncio.run(_list_public(settings))

    if command == "export":
        return asyncio.run(_export_public(settings))

    if command == "shell":
        logger.info("Starting interactive shell")
        return asyncio.run(_shell(settings))

    print(f"Unknown command: {command}")
    return 1


def preview(content: str, limit: int = PREVIEW_LENGTH) -> str:
    """Shorten content for list views."""
    return content[:limit] + "..." if len(content) > limit else content


def count_line(count: int) -> str:
    noun = "memory" if count == 1 else "memories"
    return f"{count} {noun} preserved for humanity"


def format_memory(memory: Memory) -> str:
    """Render a memory as a short text block."""
    header = f"[{memory.category.value}] {memory.title}"
    meta = memory.created_at_display
    if memory.visibility == Visibility.PUBLIC:
        meta += f" - by {memory.author_label or 'anonymous'}"
    else:
        meta += " - private"
    return f"{header}\n  {meta}\n  {preview(memory.content)}"


def _print_memories(memories: list[Memory]) -> None:
    if not memories:
        print("No memories yet.")
        return
    print(count_line(len(memories)))
    print()
    for memory in memories:
        print(format_memory(memory))
        print()


async def _init(settings: Settings) -> int:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    try:
        async with open_backend(settings):
            pass
    except (MemoryGridError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    print(f"Initialized: {settings.data_dir} ({settings.backend} backend)")
    return 0


async def _list_public(settings: Settings) -> int:
    try:
        async with open_backend(settings) as backend:
            _print_memories(await backend.repository.fetch_public_memories())
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    return 0


async def _export_public(settings: Settings) -> int:
    sink = FileExportSink(settings.export_path)
    try:
        async with open_backend(settings) as backend:
            path = await backend.repository.export_visible(sink)
    except (MemoryGridError, ValueError) as e:
        print(f"Export failed: {e}")
        return 1
    print(f"Exported to {path}")
    return 0


def _ask(prompt: str) -> str:
    return input(prompt).strip()


def _ask_category() -> Category | str:
    options = ", ".join(c.value for c in Category)
    answer = _ask(f"Category ({options}) [Knowledge]: ")
    if not answer:
        return Category.KNOWLEDGE
    # Accept any casing of a known category; anything else is left for validation
    for category in Category:
        if category.value.lower() == answer.lower():
            return category
    return answer


async def _login(backend: Backend, signup: bool = False) -> None:
    email = _ask("Email: ")
    password = getpass.getpass("Password: ")
    try:
        if signup:
            session = await backend.auth.sign_up(email, password)
            if session is None:
                print("Check your inbox to confirm the account, then /login.\n")
                return
        else:
            session = await backend.auth.sign_in(email, password)
    except AuthError as e:
        print(f"{e.detail}\n")
        return
    except MemoryGridError as e:
        print(f"Error: {e}\n")
        return
    print(f"Signed in as {session.email}\n")


async def _add(backend: Backend, cell: SessionCell) -> None:
    if cell.session is None:
        print("Sign in first with /login.\n")
        return

    draft = MemoryDraft(
        title=_ask("Title: "),
        category=_ask_category(),
        content=_ask("Content: "),
        visibility=Visibility.PUBLIC if _ask("Make public? [y/N]: ").lower() == "y" else None,
    )
    try:
        memory = await backend.repository.create_memory(draft)
    except Unauthenticated:
        print("Your session has ended. Sign in again with /login.\n")
        return
    except InvalidInput as e:
        print(f"{e}\n")
        return
    except MemoryGridError as e:
        print(f"Could not preserve memory: {e}\n")
        return
    print(f"Preserved '{memory.title}' ({memory.visibility.value}).\n")


async def _shell(settings: Settings) -> int:
    """Interactive loop over the memory repository."""
    sink = FileExportSink(settings.export_path)
    cell = SessionCell()

    try:
        async with open_backend(settings) as backend:
            await cell.attach(backend.auth)

            print("Memory Grid")
            print(SHELL_HELP)
            print("-" * 40)

            try:
                while True:
                    try:
                        user_input = _ask("> ")
                    except EOFError:
                        break

                    if not user_input:
                        continue

                    if user_input.lower() in ("/exit", "exit", "quit", "q"):
                        break
                    if user_input == "/help":
                        print(SHELL_HELP + "\n")
                    elif user_input == "/signup":
                        await _login(backend, signup=True)
                    elif user_input == "/login":
                        await _login(backend)
                    elif user_input == "/logout":
                        await backend.auth.sign_out()
                        print("Signed out.\n")
                    elif user_input == "/whoami":
                        session = cell.session
                        print(f"{session.email} ({session.user_id})\n" if session else "Not signed in.\n")
                    elif user_input == "/list":
                        _print_memories(await backend.repository.fetch_all_visible(cell.user_id))
                    elif user_input == "/add":
                        await _add(backend, cell)
                    elif user_input == "/export":
                        try:
                            path = await backend.repository.export_visible(sink, cell.user_id)
                            print(f"Exported to {path}\n")
                        except MemoryGridError as e:
                            print(f"Export failed: {e}\n")
                    else:
                        print("Unknown command. Type /help.\n")
            except KeyboardInterrupt:
                print("\n")
            finally:
                cell.detach()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
