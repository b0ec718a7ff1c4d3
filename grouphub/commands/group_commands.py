import aiohttp

from grouphub.upload import load_file

from .command import Command, CommandRegistry

BUSY = "*An update is already running, try again when it finishes*"


@CommandRegistry.register("search", "Search groups by name (usage: $search term)")
class SearchCommand(Command):
    async def execute(self, args: str = "") -> str:
        # Results arrive through the store once the input settles
        self.session.search.on_search_query(args.strip())
        if not args.strip():
            return "*Search cleared*"
        return f"*Searching for '{args.strip()}'...*"


@CommandRegistry.register("explore", "Browse groups in a category (usage: $explore category [page])")
class ExploreCommand(Command):
    async def execute(self, args: str = "") -> str:
        parts = args.split()
        if not parts:
            return "*Provide a category to explore*"
        category = parts[0]
        page = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else 0

        explore = self.session.explore
        if explore is None or explore.category != category:
            explore = await self.session.open_explore(category)
        try:
            groups = await explore.fetch_page(page)
        except aiohttp.ClientError as e:
            return f"*Failed to load groups: {str(e)}*"
        if not groups:
            return "*No more groups*"
        return "```\n" + "".join(f"- {group.name} ({group.id})\n" for group in groups) + "```"


@CommandRegistry.register("rename", "Rename the group (usage: $rename new name)", owner_only=True)
class RenameCommand(Command):
    async def execute(self, args: str = "") -> str:
        settings = self.session.settings
        if settings.is_pending:
            return BUSY
        result = await settings.submit(name=args.strip() or None)
        if result is None:
            return f"*{settings.errors.get('name', 'Invalid name')}*"
        return "*Group renamed*" if result.ok else "*Rename failed*"


@CommandRegistry.register("describe", "Set the group description (usage: $describe text)", owner_only=True)
class DescribeCommand(Command):
    async def execute(self, args: str = "") -> str:
        settings = self.session.settings
        if settings.is_pending:
            return BUSY
        text = args.strip()
        settings.set_description(text or None)
        settings.set_json_description(
            {"type": "doc", "content": [{"type": "paragraph", "content": [{"type": "text", "text": text}]}]}
            if text else None
        )
        result = await settings.submit()
        if result is None:
            return "*" + "; ".join(settings.errors.values()) + "*"
        return "*Description updated*" if result.ok else "*Description update failed*"


@CommandRegistry.register("gallery", "Add media to the about page (usage: $gallery embed-url | image paths)", owner_only=True)
class GalleryCommand(Command):
    async def execute(self, args: str = "") -> str:
        parts = args.split()
        if not parts:
            return "*Provide an embed link or image paths*"
        gallery = self.session.gallery
        if gallery.is_pending:
            return BUSY
        if parts[0].startswith("http"):
            result = await gallery.add(videourl=parts[0])
        else:
            try:
                images = [load_file(path) for path in parts]
            except OSError as e:
                return f"*Failed to read file: {str(e)}*"
            result = await gallery.add(image=images)

        if result is None:
            return "*" + "; ".join(gallery.errors.values()) + "*"
        return f"*Added {len(result.added)} item(s) to the gallery*"


@CommandRegistry.register("unmedia", "Remove media from the about page (usage: $unmedia media-id)", owner_only=True)
class RemoveMediaCommand(Command):
    async def execute(self, args: str = "") -> str:
        if not args.strip():
            return "*Provide the media id to remove*"
        removed = await self.session.gallery.remove(args.strip())
        if removed is None:
            return "*A removal is already running*"
        return "*Media removed*" if removed.ok else f"*{removed.message or 'Failed to remove media'}*"


@CommandRegistry.register("domain", "Show the group's custom domain")
class DomainCommand(Command):
    async def execute(self, args: str = "") -> str:
        config = self.session.domain.config
        if config is None or not config.domain:
            return "*No custom domain set*"
        return f"*{config.domain} ({config.status or 'pending'})*"


@CommandRegistry.register("adddomain", "Attach a custom domain (usage: $adddomain example.com)", owner_only=True)
class AddDomainCommand(Command):
    async def execute(self, args: str = "") -> str:
        domain = self.session.domain
        if domain.is_pending:
            return BUSY
        result = await domain.add_domain(args.strip())
        if result is None:
            return f"*{domain.errors.get('domain', 'Invalid domain')}*"
        return f"*{result.message or ('Domain added' if result.ok else 'Failed to add domain')}*"
