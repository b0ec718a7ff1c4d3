import aiohttp

from .command import Command, CommandRegistry


@CommandRegistry.register("help", "List all available commands and their descriptions")
class HelpCommand(Command):
    async def execute(self, args: str = "") -> str:
        help_text = "Available commands:\n\n"
        for cmd, desc in CommandRegistry.get_command_descriptions().items():
            help_text += f"${cmd}: {desc}\n"
        return f"```\n{help_text}```"


@CommandRegistry.register("online", "Show who is online in the group chat")
class OnlineCommand(Command):
    async def execute(self, args: str = "") -> str:
        online = self.session.store.online_ids()
        if not online:
            return "*Nobody is online*"
        return "```\nOnline:\n\n" + "".join(f"- {user_id}\n" for user_id in online) + "```"


@CommandRegistry.register("members", "List the members of the group")
class MembersCommand(Command):
    async def execute(self, args: str = "") -> str:
        try:
            await self.session.queries.invalidate_queries(("member-chats",))
        except aiohttp.ClientError as e:
            return f"*Failed to fetch members: {str(e)}*"

        members = self.session.members.members
        if not members:
            return "*No members found*"
        online = set(self.session.store.online_ids())
        member_list = "Members:\n\n"
        for member in members:
            member_list += f"- {member.name or member.id}"
            if member.id in online:
                member_list += " (online)"
            member_list += "\n"
        return f"```\n{member_list}```"
