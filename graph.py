"""
Console entry point for the triage chat.
Runs turns through the same service the API uses.
"""

import asyncio

from triage_handoff import config
from triage_handoff.graph.builder import build_triage_service
from triage_handoff.utils.logger import configure_logging, get_logger

# Simple logs for console
configure_logging(level="INFO", use_structured=False)

logger = get_logger(__name__)


async def run_console_chat():
    """Async main loop for console chat interaction."""
    logger.info("console_mode_started")
    service = build_triage_service(config.get_settings())

    conversation_id = None

    print("\n" + "=" * 60)
    print("Triage chat - Type 'exit' or 'quit' to stop")
    print("=" * 60 + "\n")

    while True:
        try:
            question = input("\nBạn: ")
            if question.lower() in ["exit", "quit"]:
                break
            if not question.strip():
                continue

            result = await service.submit_message(question, conversation_id=conversation_id)
            conversation_id = result.conversation.id

            print(f"-> State: {result.state.value}")
            print(f"\nBot:\n{result.reply}")

        except KeyboardInterrupt:
            logger.info("conversation_interrupted_by_user")
            break
        except Exception as e:
            logger.error("conversation_error", exc_info=True, error=str(e))
            print(f"\nError: {e}")
            break

    await service.wait_for_background()
    logger.info("conversation_ended", conversation_id=conversation_id)
    print("\nTạm biệt!")


if __name__ == "__main__":
    asyncio.run(run_console_chat())
