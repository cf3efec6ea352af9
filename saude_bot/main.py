"""Terminal entry point for the health service chatbot.

Runs the questionnaire in the terminal, which is handy for trying a flow
without WhatsApp.  In the ``location`` flow, answer the location
question with ``lat, lon`` (e.g. ``-8.7612, -63.9004``).

Usage:
    python -m saude_bot.main                        # city flow (static table)
    python -m saude_bot.main --flow neighborhood    # needs the mock API running
    python -m saude_bot.main --flow location        # Nominatim + open data
    python -m saude_bot.main --lookup centro        # one-off facilities API query
    python -m saude_bot.main --debug                # show HTTP calls
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import asdict

from dotenv import load_dotenv

from saude_bot.conversation.engine import ConversationEngine
from saude_bot.conversation.states import Flow
from saude_bot.facilities.formatting import format_neighborhood_units
from saude_bot.services.facilities_api import FacilitiesApiClient
from saude_bot.services.http_client import ExternalAPIError

logger = logging.getLogger(__name__)

TERMINAL_USER = "terminal"


def _configure_logging(debug: bool = False) -> None:
    """WARNING by default, DEBUG when --debug is passed."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s - %(message)s",
    )

    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger("saude_bot").setLevel(logging.DEBUG if debug else logging.WARNING)


def _say(messages: list[str]) -> None:
    for text in messages:
        print(f"Bot: {text}\n")


def lookup(neighborhood: str, client: FacilitiesApiClient | None = None) -> int:
    """Query the facilities API once and print the result."""
    client = client or FacilitiesApiClient()
    print(f'Bot: Buscando postos de saúde no bairro "{neighborhood}"...\n')
    try:
        units = client.list_by_neighborhood(neighborhood)
    except ExternalAPIError as exc:
        logger.error("Facilities API unavailable: %s", exc)
        print("Bot: Parece que o serviço está fora do ar. Tente novamente mais tarde.")
        return 1
    print(f"Bot: {format_neighborhood_units(units, neighborhood)}")
    return 0


def chat(engine: ConversationEngine) -> None:
    """Interactive loop; ends when the flow completes or the user quits."""
    print("--- Atendimento via Terminal Iniciado (digite 'sair' para encerrar) ---\n")
    _say(engine.handle_text(TERMINAL_USER, "").messages)

    while True:
        try:
            user_input = input("Você: ")
        except (KeyboardInterrupt, EOFError):
            print("\n\nAté logo!")
            break

        command = user_input.strip().lower()
        if command in ("sair", "quit", "exit"):
            print("\nAté logo!")
            break
        if command == "new":
            engine.reset(TERMINAL_USER)
            print("\n>> Nova sessão iniciada.\n")
            _say(engine.handle_text(TERMINAL_USER, "").messages)
            continue

        reply = engine.handle_text(TERMINAL_USER, user_input)
        print()
        _say(reply.messages)

        if reply.completed:
            print("--- Dados Finais Coletados ---")
            for key, value in asdict(reply.profile).items():
                if value is not None:
                    print(f"  {key}: {value}")
            break


def main():
    parser = argparse.ArgumentParser(description="Saúde Bot terminal chat")
    parser.add_argument(
        "--flow", choices=[f.value for f in Flow], default=Flow.CITY.value,
        help="Questionnaire to run (default: city)",
    )
    parser.add_argument(
        "--lookup", metavar="BAIRRO",
        help="Query the facilities API for a neighborhood and exit",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Show all log messages including HTTP requests",
    )
    args = parser.parse_args()

    load_dotenv()
    _configure_logging(debug=args.debug)

    if args.lookup:
        raise SystemExit(lookup(args.lookup))

    chat(ConversationEngine(args.flow))


if __name__ == "__main__":
    main()
