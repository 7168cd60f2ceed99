import logging

from fractional_investor.config import load_settings
from fractional_investor.conversation_manager import ConversationManager


def main():
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    manager = ConversationManager(settings=settings)

    print("Welcome to Fractional Stock Investor")
    print("Type 'help' for commands, 'exit' to quit.\n")

    # Print the opening prompt without waiting for user input
    print("Bot:", manager.start())

    while True:
        try:
            user_input = input("\nYou: ")
        except EOFError:
            user_input = "exit"

        response = manager.handle_message(user_input)
        print("Bot:", response)

        if manager.context.is_complete():
            break


if __name__ == "__main__":
    main()
