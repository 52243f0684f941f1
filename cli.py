"""Interactive command-line conversation.

Commands typed at the prompt:
  reset               start over on a new thread
  history             print the message log
  questions <topic>   generate sample questions about <topic>
  usage               print token totals
  exit / quit         leave
Anything else is sent as a question.
"""

import argparse
import asyncio
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from openai import AsyncOpenAI

from models.conversation_models import ResponseMode
from services.conversation.errors import ConversationError
from services.conversation.session import ConversationSession
from utils.settings import ConversationSettings, require_api_key

DEFAULT_INSTRUCTION = "You are a film expert, be concise and to the point"
EXIT_COMMANDS = {"exit", "quit"}


def _parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Chat with an OpenAI model from the terminal.")
    parser.add_argument("--model", help="Model identifier (defaults to OPENAI_MODEL).")
    parser.add_argument("--instruction", default=DEFAULT_INSTRUCTION, help="Instruction sent with every question.")
    parser.add_argument(
        "--assistant",
        nargs="?",
        const="",
        default=None,
        help="Answer through an assistant; the id defaults to OPENAI_ASSISTANT_ID.",
    )
    parser.add_argument("--count", type=int, default=3, help="Sample questions to generate.")
    parser.add_argument("--max-words", type=int, default=10, help="Word limit per sample question.")
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> None:
    settings = ConversationSettings.from_env()
    require_api_key()

    mode = ResponseMode.COMPLETION
    assistant_id = None
    if args.assistant is not None:
        assistant_id = args.assistant or settings.assistant_id
        if not assistant_id:
            raise SystemExit("An assistant id is required: pass --assistant <id> or set OPENAI_ASSISTANT_ID.")
        mode = ResponseMode.ASSISTANT

    client = AsyncOpenAI()
    session = await ConversationSession.open(
        client,
        args.model or settings.model,
        poll_interval=settings.poll_interval,
        poll_timeout=settings.poll_timeout,
        prompt_warn_after=settings.prompt_warning_entries,
    )
    print(f"Model {session.model}, {mode.value} mode. Type 'exit' to quit.")

    while True:
        user_msg = (await asyncio.to_thread(input, "You: ")).strip()
        if not user_msg:
            continue
        command = user_msg.lower()
        if command in EXIT_COMMANDS:
            break
        try:
            if command == "reset":
                await session.reset()
                print("[conversation reset]")
            elif command == "history":
                for line in session.history_view():
                    print(line)
            elif command == "usage":
                print(session.usage.as_dict())
            elif command.startswith("questions "):
                questions = await session.generate_sample_questions(
                    user_msg[len("questions "):],
                    args.count,
                    args.max_words,
                    mode=mode,
                    assistant_id=assistant_id,
                )
                for number, question in enumerate(questions, start=1):
                    print(f"{number}. {question}")
            else:
                reply = await session.ask(args.instruction, user_msg, mode=mode, assistant_id=assistant_id)
                print(f"AI: {reply}")
        except (ConversationError, ValueError) as exc:
            print(f"[{type(exc).__name__}] {exc}")


def main(argv: Optional[list] = None) -> None:
    load_dotenv()
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "WARNING").upper())
    try:
        asyncio.run(run(_parse_args(argv)))
    except (KeyboardInterrupt, EOFError):
        print()


if __name__ == "__main__":
    main()
