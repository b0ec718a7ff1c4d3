import importlib
from pathlib import Path

from .command import Command, CommandRegistry
from .command_handler import PREFIX, CommandHandler

# Register every *_commands.py module so the handler sees its commands
for file in sorted(Path(__file__).parent.glob("*_commands.py")):
    importlib.import_module(f"{__name__}.{file.stem}")

__all__ = ['Command', 'CommandHandler', 'CommandRegistry', 'PREFIX']
