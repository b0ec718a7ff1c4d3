import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from grouphub import env
from grouphub.actions import GroupActions
from grouphub.models.data import ActionResult, Group, MediaEntry, UploadFile
from grouphub.models.forms import UpdateGalleryForm, form_errors
from grouphub.notifications import Toaster
from grouphub.query import Mutation
from grouphub.upload import Uploader, UploadError

logger = logging.getLogger(__name__)


def can_manage(user_id: str, group: Group) -> bool:
    """Only the group owner edits the gallery."""
    return bool(user_id) and user_id == group.user_id


def media_urls(group: Group, cdn_url: str = env.UPLOAD_CDN_URL) -> List[str]:
    return [entry.url(cdn_url) for entry in group.gallery]


@dataclass
class GalleryUpdate:
    added: List[MediaEntry] = field(default_factory=list)
    failed: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed is None


class MediaGallery:
    """
    Adds and removes media on a group's about page.

    Images are uploaded and committed one after another in the order given.
    The first failed upload or commit ends the batch; entries already
    committed stay. Each operation reports its own pending flag so callers
    can disable their controls.
    """

    def __init__(self, actions: GroupActions, uploader: Uploader, toaster: Toaster, group_id: str):
        self.actions = actions
        self.uploader = uploader
        self.toaster = toaster
        self.group_id = group_id
        self.errors: Dict[str, str] = {}
        self.update_mutation = Mutation("update-gallery", self._update)
        self.remove_mutation = Mutation("remove-gallery-item", self._remove)

    @property
    def is_pending(self) -> bool:
        return self.update_mutation.is_pending

    @property
    def is_removing(self) -> bool:
        return self.remove_mutation.is_pending

    async def add(self, videourl: Optional[str] = None, image: Optional[List[UploadFile]] = None) -> Optional[GalleryUpdate]:
        try:
            form = UpdateGalleryForm(videourl=videourl or None, image=image or [])
        except ValidationError as e:
            self.errors = form_errors(e)
            return None
        self.errors = {}
        return await self.update_mutation.mutate(form)

    async def remove(self, media: Union[MediaEntry, str]) -> Optional[ActionResult]:
        media_id = media.ref if isinstance(media, MediaEntry) else media
        return await self.remove_mutation.mutate(media_id)

    async def _update(self, form: UpdateGalleryForm) -> GalleryUpdate:
        result = GalleryUpdate()

        if form.videourl:
            entry = MediaEntry.embed(form.videourl)
            update = await self.actions.update_group_gallery(self.group_id, entry)
            if not update.ok:
                result.failed = form.videourl
                self.toaster.error(update.message or "Looks like something went wrong!")
                return result
            result.added.append(entry)

        for upload in form.image:
            try:
                uploaded = await self.uploader.upload_file(upload)
            except UploadError as e:
                logger.error(f"Gallery upload stopped at {upload.name}: {e}")
                result.failed = upload.name
                self.toaster.error("Looks like something went wrong!")
                break

            entry = MediaEntry.image(uploaded.uuid)
            update = await self.actions.update_group_gallery(self.group_id, entry)
            if not update.ok:
                result.failed = upload.name
                self.toaster.error(update.message or "Looks like something went wrong!")
                break
            result.added.append(entry)

        if result.ok:
            self.toaster.success("Group gallery updated")
        return result

    async def _remove(self, media_id: str) -> ActionResult:
        removed = await self.actions.remove_group_gallery(self.group_id, media_id)
        if not removed.ok:
            self.toaster.error(removed.message or "Failed to remove media")
        else:
            self.toaster.success("Media removed from gallery")
        return removed
