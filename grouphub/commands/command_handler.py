import logging
from typing import Optional

from .command import CommandRegistry

logger = logging.getLogger(__name__)

PREFIX = "$"


class CommandHandler:
    def __init__(self, session):
        self.session = session

        # Initialize all registered commands
        self.commands = {}
        for name, command_class in CommandRegistry.get_commands().items():
            self.commands[name] = command_class(session)

    @staticmethod
    def is_command(line: str) -> bool:
        return line.startswith(PREFIX)

    async def handle_command(self, command: str) -> Optional[str]:
        """
        Handle console commands and route to the matching command class
        """
        # Split "$name rest of line" into the command name and its arguments
        parts = command[len(PREFIX):].strip().split(maxsplit=1)
        if not parts:
            return "*Type $help to see available commands*"
        base_command = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        command_obj = self.commands.get(base_command)
        if command_obj:
            if not command_obj.allowed():
                return f"*Only the group owner can use ${base_command}*"
            logger.debug(f"Running command {base_command}")
            return await command_obj.execute(args)

        return "*Not a valid command*"
