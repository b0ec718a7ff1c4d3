import asyncio
import logging
import sys

from grouphub.env import LOG_LEVEL, REALTIME_URL


def get_log_level(level_str: str) -> int:
    """Convert string log level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(level_str.upper(), logging.INFO)


# Configure logging
logging.basicConfig(
    level=get_log_level(LOG_LEVEL),
    format='%(asctime)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

from grouphub.commands.command_handler import CommandHandler  # noqa: E402
from grouphub.session import GroupSession  # noqa: E402
from grouphub.utils import truncate  # noqa: E402


class ConsoleView:
    """Prints store changes for the console client."""

    def __init__(self, session: GroupSession):
        self.session = session
        self.shown_ids = set()

    def __call__(self, slice_name: str):
        store = self.session.store
        if slice_name == "chat":
            for message in store.chat:
                if message.id in self.shown_ids:
                    continue
                self.shown_ids.add(message.id)
                who = "you" if message.sender_id == self.session.user_id else message.sender_id
                print(f"[{who}] {message.message}")
        elif slice_name == "online":
            print(f"* online: {', '.join(store.online_ids())}")
        elif slice_name == "search" and not store.search.is_searching and store.search.debounce:
            names = ", ".join(truncate(group.name, 30) for group in store.search.data) or "no groups"
            print(f"* results for '{store.search.debounce}': {names}")

    def scroll_to_bottom(self):
        sys.stdout.flush()


async def read_lines(session: GroupSession, commands: CommandHandler):
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            return
        line = line.strip()
        if not line:
            continue
        if CommandHandler.is_command(line):
            response = await commands.handle_command(line)
            if response:
                print(response)
        elif session.composer is not None:
            await session.composer.submit(line)
            if session.composer.errors:
                print(f"* {session.composer.errors.get('message')}")
        else:
            print("* Set RECEIVER_ID to chat, or type $help")


# Define an async function for the main workflow
async def main():
    session = GroupSession.from_env()
    view = ConsoleView(session)
    session.store.subscribe(view)
    session.toaster.add_sink(lambda toast: print(f"* {toast.title}: {toast.description}"))

    try:
        await session.realtime.connect()
        logger.info("Connection established successfully")
    except Exception as e:
        logger.error(f"Failed to connect to {REALTIME_URL}: {str(e)}", exc_info=True)
        return

    commands = CommandHandler(session)
    try:
        await session.start()
        if session.chat is not None:
            session.chat.attach_window(view)
        await read_lines(session, commands)
    finally:
        await session.stop()
        await session.realtime.disconnect()


def run():
    asyncio.run(main())


if __name__ == "__main__":
    run()
