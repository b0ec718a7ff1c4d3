from typing import Callable, Dict, Type

from grouphub.hooks.gallery import can_manage


class Command:
    """Base interface for all console commands"""
    name: str
    description: str
    owner_only: bool = False

    def __init__(self, session):
        self.session = session

    def allowed(self) -> bool:
        """Owner-only commands need the loaded group to belong to the session user"""
        if not self.owner_only:
            return True
        group = self.session.settings.group
        return group is not None and can_manage(self.session.user_id, group)

    async def execute(self, args: str = "") -> str:
        """Execute the command with everything typed after its name"""
        raise NotImplementedError


class CommandRegistry:
    """Registry for all console commands"""
    _commands: Dict[str, Type[Command]] = {}

    @classmethod
    def register(cls, name: str, description: str, owner_only: bool = False) -> Callable:
        """Decorator to register a command under its console name"""
        def decorator(command_cls: Type[Command]) -> Type[Command]:
            command_cls.name = name
            command_cls.description = description
            command_cls.owner_only = owner_only
            cls._commands[name] = command_cls
            return command_cls
        return decorator

    @classmethod
    def get_commands(cls) -> Dict[str, Type[Command]]:
        return cls._commands

    @classmethod
    def get_command_descriptions(cls) -> Dict[str, str]:
        """Descriptions keyed by name, owner-only commands marked"""
        return {
            name: f"{cmd.description} (owner only)" if cmd.owner_only else cmd.description
            for name, cmd in cls._commands.items()
        }
