import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from grouphub.actions import GroupActions
from grouphub.hooks.base_hook import Hook
from grouphub.models.data import Group, MediaEntry
from grouphub.models.forms import GroupSettingsForm, form_errors
from grouphub.notifications import Navigator, Toaster
from grouphub.query import Mutation, Query, QueryClient
from grouphub.upload import Uploader, UploadError

logger = logging.getLogger(__name__)

EMPTY_FORM = "Oops! looks like your form is empty"

# Commit order matters: uploads first, then the text fields
SETTINGS_FIELDS: List[Tuple[str, str]] = [
    ("thumbnail", "IMAGE"),
    ("icon", "ICON"),
    ("name", "NAME"),
    ("description", "DESCRIPTION"),
    ("jsondescription", "JSONDESCRIPTION"),
]
ABOUT_FIELDS: List[Tuple[str, str]] = [
    ("description", "DESCRIPTION"),
    ("jsondescription", "JSONDESCRIPTION"),
    ("htmldescription", "HTMLDESCRIPTION"),
]
UPLOAD_FIELDS = ("thumbnail", "icon")


@dataclass
class SubmitResult:
    committed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    @property
    def empty(self) -> bool:
        return not self.committed and not self.failed

    @property
    def ok(self) -> bool:
        return bool(self.committed) and not self.failed


class FieldSync(Hook):
    """
    Maps a group form onto single-field update actions.

    Each present field becomes one ``update_group_settings`` call, in the
    order of ``fields``. Fields commit independently: a failed field gets its
    own error toast and the rest still run. "Success" is only shown when
    every attempted field went through.
    """

    fields: List[Tuple[str, str]] = []
    success_message = "Group data updated"
    invalidate_key: Optional[Tuple[str, ...]] = None

    def __init__(self, actions: GroupActions, queries: QueryClient, toaster: Toaster, group_id: str,
                 uploader: Optional[Uploader] = None):
        super().__init__()
        self.actions = actions
        self.queries = queries
        self.toaster = toaster
        self.group_id = group_id
        self.uploader = uploader
        self.values: Dict[str, Any] = {}
        self.errors: Dict[str, str] = {}
        self.json_description: Optional[Dict[str, Any]] = None
        self.description: Optional[str] = None
        self.mutation = Mutation(self.name, self._commit, on_success=self._on_success)

    @property
    def redirect_path(self) -> str:
        raise NotImplementedError

    @property
    def is_pending(self) -> bool:
        return self.mutation.is_pending

    def set_value(self, name: str, value: Any):
        self.values[name] = value

    def set_json_description(self, document: Optional[Dict[str, Any]]):
        self.json_description = document
        self._sync_descriptions()

    def set_description(self, text: Optional[str]):
        self.description = text
        self._sync_descriptions()

    def _sync_descriptions(self):
        self.values["jsondescription"] = json.dumps(self.json_description) if self.json_description is not None else None
        self.values["description"] = self.description

    async def submit(self, **values: Any) -> Optional[SubmitResult]:
        """Validate the form and commit it. Returns None when validation fails."""
        data = {**self.values, **values}
        try:
            form = GroupSettingsForm(**{name: value for name, value in data.items() if value is not None})
        except ValidationError as e:
            self.errors = form_errors(e)
            logger.debug(f"Rejected {self.name} form: {self.errors}")
            return None
        self.errors = {}
        return await self.mutation.mutate(form)

    async def _commit(self, form: GroupSettingsForm) -> SubmitResult:
        result = SubmitResult()
        present = [(name, tag) for name, tag in self.fields if getattr(form, name)]
        if not present:
            self.toaster.error(EMPTY_FORM)
            return result

        for name, tag in present:
            if await self._commit_field(name, tag, getattr(form, name)):
                result.committed.append(tag)
            else:
                result.failed.append(tag)

        if result.ok:
            self.toaster.success(self.success_message)
        return result

    async def _commit_field(self, name: str, tag: str, value: Any) -> bool:
        if name in UPLOAD_FIELDS:
            try:
                uploaded = await self.uploader.upload_file(value[0])
            except UploadError as e:
                logger.error(f"{name.capitalize()} Error: {e}")
                self.toaster.error(f"Failed to update {name}.")
                return False
            value = uploaded.uuid

        updated = await self.actions.update_group_settings(self.group_id, tag, value, self.redirect_path)
        if not updated.ok:
            self.toaster.error(updated.message or f"Failed to update {name}.")
            return False
        return True

    async def _on_success(self, result: SubmitResult):
        if self.invalidate_key and not result.empty:
            await self.queries.invalidate_queries(self.invalidate_key)


class GroupSettings(FieldSync):
    """
    Settings page form for a group.

    The group is fetched under the fixed "group-info" key, so one client
    edits one group at a time. The editor's document and plain description
    live outside the form and are copied into it on every change.
    """

    name = "group-settings"
    fields = SETTINGS_FIELDS
    invalidate_key = ("group-info",)

    def __init__(self, actions: GroupActions, uploader: Uploader, queries: QueryClient, toaster: Toaster,
                 navigator: Navigator, group_id: str):
        super().__init__(actions, queries, toaster, group_id, uploader=uploader)
        self.navigator = navigator
        self.query: Optional[Query] = None

    @property
    def redirect_path(self) -> str:
        return f"/group/{self.group_id}/settings"

    @property
    def group(self) -> Optional[Group]:
        if self.query is None or self.query.data is None:
            return None
        return self.query.data.group

    async def on_mount(self):
        self.query = self.queries.use_query(("group-info",), lambda: self.actions.get_group_info(self.group_id))
        result = await self.query.fetch()
        if self.scope.closed:
            return
        if not result.ok or result.group is None:
            self.navigator.push("/group/create")
            return
        # Seed the editor only; the form picks values up once they are edited
        group = result.group
        self.json_description = json.loads(group.json_description) if group.json_description else None
        self.description = group.description


class GroupAbout(FieldSync):
    """Inline description editor on a group's about page."""

    name = "about-description"
    fields = ABOUT_FIELDS
    success_message = "Group description updated"

    def __init__(self, actions: GroupActions, queries: QueryClient, toaster: Toaster, group: Group,
                 current_media: Optional[MediaEntry] = None):
        super().__init__(actions, queries, toaster, group.id)
        self.json_description = json.loads(group.json_description) if group.json_description else None
        self.description = group.description
        self.html_description = group.html_description
        self.active_media = current_media or (group.gallery[0] if group.gallery else None)

    @property
    def redirect_path(self) -> str:
        return f"/about/{self.group_id}"

    def set_html_description(self, html: Optional[str]):
        self.html_description = html
        self._sync_descriptions()

    def _sync_descriptions(self):
        super()._sync_descriptions()
        self.values["htmldescription"] = self.html_description

    def set_active_media(self, media: MediaEntry):
        self.active_media = media


class GroupInfo(Hook):
    """Group shown on the public about page. Missing groups send the viewer back to explore."""

    name = "group-info"

    def __init__(self, actions: GroupActions, queries: QueryClient, navigator: Navigator, group_id: str):
        super().__init__()
        self.actions = actions
        self.queries = queries
        self.navigator = navigator
        self.group_id = group_id
        self.group: Optional[Group] = None

    async def on_mount(self):
        query = self.queries.use_query(("about-group-info",), lambda: self.actions.get_group_info(self.group_id))
        result = await query.fetch()
        if self.scope.closed:
            return
        if result is None or not result.ok or result.group is None:
            self.navigator.push("/explore")
            return
        self.group = result.group
