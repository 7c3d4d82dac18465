#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Callable, Optional

from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table

from .client import TadokuClient
from .config import load_config, save_config, setup_logging
from .detail import StoryDetailView
from .errors import AuthError, TadokuError

logger = logging.getLogger("tadoku")

console = Console()
err_console = Console(stderr=True)

ConfirmFn = Callable[[str], bool]


def _ask(question: str) -> bool:
    return Confirm.ask(question, console=console)


# --- Commands ---
async def cmd_signup(client: TadokuClient, args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Password: ")
    await client.auth.signup(args.email, password)
    console.print("[green]Account created.[/] Log in with [b]tadoku login[/].")


async def cmd_login(client: TadokuClient, args: argparse.Namespace) -> None:
    password = args.password or getpass.getpass("Password: ")
    await client.auth.login(args.email, password)
    console.print("[green]Login successful![/]")


async def cmd_logout(client: TadokuClient, args: argparse.Namespace) -> None:
    client.auth.logout()
    console.print("Logged out.")


async def cmd_list(client: TadokuClient, args: argparse.Namespace) -> None:
    page = await client.stories.load(args.page)
    if page is None or not page.items:
        console.print("[dim]You haven't generated any stories yet.[/]")
        return
    table = Table(title=f"Your Stories (page {page.page}/{max(page.total_pages, 1)})")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Words", justify="right")
    table.add_column("Created")
    for story in page.items:
        created = story.created_at.strftime("%Y-%m-%d %H:%M") if story.created_at else ""
        table.add_row(str(story.id), story.title, f"{story.word_count:,}", created)
    console.print(table)


async def cmd_show(client: TadokuClient, args: argparse.Namespace) -> None:
    view = client.story(args.id)
    detail = await view.load()
    if detail is None:
        return
    console.rule(f"[b]{detail.title}")
    console.print(detail.content)
    console.rule()
    console.print(f"{detail.word_count:,} words, read {detail.read_count} time(s)")


async def cmd_generate(client: TadokuClient, args: argparse.Namespace) -> None:
    await client.quota.refresh()
    with console.status("Generating..."):
        story = await client.generator.generate(args.prompt)
    console.rule(f"[b]{story.title}")
    console.print(story.content)
    status = client.quota.status
    if status is not None:
        console.print(f"[dim]{status.remaining} generation(s) left today.[/]")


async def cmd_rename(client: TadokuClient, args: argparse.Namespace) -> None:
    view = client.story(args.id)
    await view.load()
    detail = await view.edit_title(args.title)
    if detail is not None:
        console.print(f"Renamed to [b]{detail.title}[/].")


async def cmd_delete(client: TadokuClient, args: argparse.Namespace, confirm: ConfirmFn = _ask) -> None:
    collection = client.stories
    await collection.load(args.page)
    collection.request_delete(args.id)
    story = collection.find(args.id)
    if not confirm(f"Delete '{story.title if story else args.id}'? This cannot be undone"):
        collection.cancel_delete()
        return
    await collection.confirm_delete()
    console.print(f"Deleted story {args.id}.")


async def _settle(view: StoryDetailView, question: str, confirm: ConfirmFn) -> bool:
    if not view.awaiting_confirmation:
        return True
    if confirm(question):
        return await view.confirm()
    view.cancel()
    return False


async def cmd_read(client: TadokuClient, args: argparse.Namespace, confirm: ConfirmFn = _ask) -> None:
    view = client.story(args.id)
    await view.load()
    await view.mark_as_read()
    question = f"You have read this {view.read_count} time(s) already. Record another read?"
    if await _settle(view, question, confirm):
        console.print(f"Marked as read ({view.read_count}).")


async def cmd_unread(client: TadokuClient, args: argparse.Namespace, confirm: ConfirmFn = _ask) -> None:
    view = client.story(args.id)
    await view.load()
    await view.undo_last_read()
    if await _settle(view, "Remove the most recent read record?", confirm):
        console.print(f"Last read removed ({view.read_count}).")


async def cmd_quota(client: TadokuClient, args: argparse.Namespace) -> None:
    status = await client.quota.refresh()
    console.print(f"Generated today: {status.current_count}/{status.limit}")


async def cmd_configure(client: TadokuClient, args: argparse.Namespace) -> None:
    updates = {
        key: value
        for key, value in (
            ("api_base_url", args.server),
            ("page_size", args.page_size),
            ("timeout", args.timeout),
        )
        if value is not None
    }
    if updates:
        client.config.update(updates)
        save_config(client.config)
    for key, value in sorted(client.config.items()):
        console.print(f"[b]{key}[/] = {value}")


async def cmd_stats(client: TadokuClient, args: argparse.Namespace) -> None:
    stats = await client.stats()
    console.print(f"[b]Total words read:[/] {stats.total_word_count:,}")
    table = Table()
    for label in ("Today", "This week", "This month", "This year"):
        table.add_column(label, justify="right")
    table.add_row(
        f"{stats.today_word_count:,}",
        f"{stats.weekly_word_count:,}",
        f"{stats.monthly_word_count:,}",
        f"{stats.yearly_word_count:,}",
    )
    console.print(table)
    for day, count in stats.last_7_days_word_count.items():
        console.print(f"  {day}  {count:,}")


COMMANDS = {
    "signup": cmd_signup,
    "login": cmd_login,
    "logout": cmd_logout,
    "list": cmd_list,
    "show": cmd_show,
    "generate": cmd_generate,
    "rename": cmd_rename,
    "delete": cmd_delete,
    "read": cmd_read,
    "unread": cmd_unread,
    "quota": cmd_quota,
    "stats": cmd_stats,
    "configure": cmd_configure,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tadoku", description="Tadoku reading practice client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--base-url", type=str, help="API server, e.g. http://localhost:8080")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("signup", "login"):
        p = sub.add_parser(name)
        p.add_argument("email")
        p.add_argument("--password", help="Prompted for when omitted")
    sub.add_parser("logout")

    p = sub.add_parser("list")
    p.add_argument("--page", type=int, default=1)

    for name in ("show", "read", "unread"):
        p = sub.add_parser(name)
        p.add_argument("id", type=int)

    p = sub.add_parser("delete")
    p.add_argument("id", type=int)
    p.add_argument("--page", type=int, default=1, help="Page the story is listed on")

    p = sub.add_parser("generate")
    p.add_argument("prompt")

    p = sub.add_parser("rename")
    p.add_argument("id", type=int)
    p.add_argument("title")

    sub.add_parser("quota")
    sub.add_parser("stats")

    p = sub.add_parser("configure", help="Show or save client settings")
    p.add_argument("--server", help="API server to use from now on")
    p.add_argument("--page-size", type=int)
    p.add_argument("--timeout", type=float)
    return parser


# --- Entrypoint ---
def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    if args.base_url:
        config["api_base_url"] = args.base_url

    client = TadokuClient(config)
    try:
        asyncio.run(COMMANDS[args.command](client, args))
    except AuthError as e:
        err_console.print(f"[b red]{e.message}[/] Run [b]tadoku login[/].")
        return 1
    except TadokuError as e:
        err_console.print(f"[b red]{e.message}[/]")
        return 1
    except Exception as e:
        logger.exception("Command crashed: %s", e)
        err_console.print(f"Command crashed: {e}")
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
