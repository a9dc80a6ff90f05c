from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from chatgpt_helper.config import Settings, load_settings
from chatgpt_helper.llm import ChatGPTClient, ChatGPTError, build_client
from chatgpt_helper.llm.response import image_urls, model_ids, response_text, usage
from chatgpt_helper.utils.transcript import append_turn, init_transcript, make_session_id, read_transcript

HINTS = (
    "Set a valid OPENAI_API_KEY (environment or .env)",
    "Check your internet connection",
    "Verify your OpenAI account has credits",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chatgpt-helper")
    parser.add_argument("--model", type=str, default=None, help="Model id, e.g. gpt-4o-mini")
    parser.add_argument("--temperature", type=float, default=None, help="Sampling temperature (clamped to 0.0-2.0)")
    parser.add_argument("--max-tokens", type=int, default=None, help="Maximum tokens in the reply")

    sub = parser.add_subparsers(dest="command", required=True)

    p_chat = sub.add_parser("chat", help="Send one stateless message")
    p_chat.add_argument("message", type=str)

    p_conv = sub.add_parser("converse", help="Interactive conversation with history")
    p_conv.add_argument("--system", type=str, default=None, help="System prompt applied before the first turn")
    p_conv.add_argument(
        "--no-log",
        action="store_true",
        help="Do not write a transcript (default: logs/session_*.jsonl)",
    )

    p_img = sub.add_parser("image", help="Generate images from a prompt")
    p_img.add_argument("prompt", type=str)
    p_img.add_argument("--size", type=str, default="1024x1024")
    p_img.add_argument("--n", type=int, default=1)

    sub.add_parser("models", help="List available models")

    p_log = sub.add_parser("transcript", help="Print the last state of a saved conversation transcript")
    p_log.add_argument("path", type=Path)
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def apply_overrides(client: ChatGPTClient, args: argparse.Namespace) -> None:
    if args.model:
        client.set_model(args.model)
    if args.temperature is not None:
        client.set_temperature(args.temperature)
    if args.max_tokens is not None:
        client.set_max_tokens(args.max_tokens)


def cmd_chat(client: ChatGPTClient, args: argparse.Namespace, console: Console) -> None:
    data = client.chat(args.message)
    console.print(response_text(data), markup=False)
    u = usage(data)
    console.print(f"[dim]tokens used: {u.get('total_tokens', 'N/A')}[/dim]")


def cmd_converse(client: ChatGPTClient, args: argparse.Namespace, console: Console, settings: Settings) -> None:
    if args.system is not None:
        client.set_system_prompt(args.system)

    log_paths = None
    if not args.no_log:
        log_paths = init_transcript(settings.log_dir, make_session_id())
        console.print(f"[bold]transcript[/bold]: {log_paths.jsonl_path}")

    console.print("[dim]/reset clears history, /history shows it, /exit quits[/dim]")
    while True:
        try:
            line = console.input("[bold green]you>[/bold green] ").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not line:
            continue
        if line == "/exit":
            break
        if line == "/reset":
            system = client.log.system_prompt
            client.clear_conversation()
            if system is not None:
                client.set_system_prompt(system)
            console.print("[dim]conversation cleared[/dim]")
            continue
        if line == "/history":
            for m in client.get_conversation():
                console.print(f"[bold]{m.role}[/bold]: {escape(m.content[:80])}")
            continue

        try:
            data = client.conversation(line)
        except ChatGPTError as e:
            # The user message stays in the history; the next turn replays it.
            print_error(console, e)
            continue
        console.print(f"[bold cyan]assistant>[/bold cyan] {escape(response_text(data))}")
        if log_paths is not None:
            append_turn(log_paths, client.get_conversation(), usage=usage(data))


def cmd_image(client: ChatGPTClient, args: argparse.Namespace, console: Console) -> None:
    data = client.generate_image(args.prompt, size=args.size, n=args.n)
    for url in image_urls(data):
        console.print(url, markup=False)


def cmd_models(client: ChatGPTClient, console: Console) -> None:
    for model_id in sorted(model_ids(client.get_models())):
        console.print(f"- {model_id}")


def cmd_transcript(args: argparse.Namespace, console: Console) -> int:
    rows = read_transcript(args.path)
    if not rows:
        console.print(f"[yellow]no transcript rows in[/yellow] {escape(str(args.path))}")
        return 1
    last = rows[-1]
    console.print(f"[bold]session[/bold]: {escape(str(last.get('session_id', '?')))} ({len(rows)} turns)")
    for m in last.get("messages") or []:
        console.print(f"[bold]{escape(str(m.get('role')))}[/bold]: {escape(str(m.get('content')))}")
    return 0


def print_error(console: Console, e: ChatGPTError) -> None:
    console.print(f"[bold red]Error[/bold red]: {escape(str(e))}")
    console.print("Make sure to:")
    for i, hint in enumerate(HINTS, start=1):
        console.print(f"{i}. {hint}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    console = Console()
    if args.command == "transcript":
        return cmd_transcript(args, console)

    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        client = build_client(settings)
        apply_overrides(client, args)
    except (RuntimeError, ValueError) as e:
        console.print(f"[bold red]configuration error[/bold red]: {escape(str(e))}")
        return 2

    try:
        if args.command == "chat":
            cmd_chat(client, args, console)
        elif args.command == "converse":
            cmd_converse(client, args, console, settings)
        elif args.command == "image":
            cmd_image(client, args, console)
        elif args.command == "models":
            cmd_models(client, console)
    except ChatGPTError as e:
        print_error(console, e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
