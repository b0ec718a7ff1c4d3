"""Tests for adding and removing gallery media."""

import asyncio

import pytest

from conftest import failed, group_payload, image, ok
from grouphub.hooks.gallery import MediaGallery, can_manage, media_urls
from grouphub.models.data import Group, MediaEntry
from grouphub.upload import UploadError, UploadResult


@pytest.fixture
def gallery(actions, uploader, toaster):
    return MediaGallery(actions, uploader, toaster, "g1")


def committed(actions):
    return [call.args for call in actions.update_group_gallery.await_args_list]


@pytest.mark.asyncio
async def test_images_are_committed_one_by_one_in_order(gallery, actions, uploader, toaster):
    result = await gallery.add(image=[image("a.png"), image("b.png"), image("c.png")])

    assert committed(actions) == [
        ("g1", MediaEntry.image("uuid-a.png")),
        ("g1", MediaEntry.image("uuid-b.png")),
        ("g1", MediaEntry.image("uuid-c.png")),
    ]
    assert [call.args[0].name for call in uploader.upload_file.await_args_list] == ["a.png", "b.png", "c.png"]
    assert result.ok
    assert [toast.title for toast in toaster.history] == ["Success"]


@pytest.mark.asyncio
async def test_upload_failure_halts_rest_of_batch(gallery, actions, uploader, toaster):
    async def upload_file(upload):
        if upload.name == "b.png":
            raise UploadError("boom")
        return UploadResult(uuid=f"uuid-{upload.name}")

    uploader.upload_file.side_effect = upload_file

    result = await gallery.add(image=[image("a.png"), image("b.png"), image("c.png")])

    assert committed(actions) == [("g1", MediaEntry.image("uuid-a.png"))]
    assert result.added == [MediaEntry.image("uuid-a.png")]
    assert result.failed == "b.png"
    assert len(toaster.errors) == 1
    assert len(toaster.history) == 1


@pytest.mark.asyncio
async def test_rejected_commit_halts_rest_of_batch(gallery, actions, uploader, toaster):
    actions.update_group_gallery.side_effect = [ok(), failed(400, "Gallery is full")]

    result = await gallery.add(image=[image("a.png"), image("b.png"), image("c.png")])

    assert uploader.upload_file.await_count == 2
    assert len(committed(actions)) == 2
    assert result.failed == "b.png"
    assert [toast.description for toast in toaster.history] == ["Gallery is full"]


@pytest.mark.asyncio
async def test_video_url_is_stored_as_embed(gallery, actions, toaster):
    url = "https://www.youtube.com/embed/abc123"

    result = await gallery.add(videourl=url)

    assert committed(actions) == [("g1", MediaEntry.embed(url))]
    assert result.added == [MediaEntry.embed(url)]
    assert toaster.history[-1].title == "Success"


@pytest.mark.asyncio
async def test_rejected_video_stops_image_uploads(gallery, actions, uploader):
    actions.update_group_gallery.return_value = failed(400, "Bad link")

    result = await gallery.add(videourl="https://www.loom.com/embed/xyz", image=[image("a.png")])

    uploader.upload_file.assert_not_awaited()
    assert result.failed == "https://www.loom.com/embed/xyz"


@pytest.mark.asyncio
async def test_non_embed_video_link_is_rejected(gallery, actions):
    assert await gallery.add(videourl="https://example.com/video.mp4") is None

    assert "videourl" in gallery.errors
    actions.update_group_gallery.assert_not_awaited()


@pytest.mark.asyncio
async def test_remove_reports_outcome(gallery, actions, toaster):
    await gallery.remove(MediaEntry.image("img-1"))
    actions.remove_group_gallery.return_value = failed(403, "Not allowed")
    await gallery.remove("img-2")

    assert [call.args for call in actions.remove_group_gallery.await_args_list] == [("g1", "img-1"), ("g1", "img-2")]
    assert [(toast.title, toast.description) for toast in toaster.history] == [
        ("Success", "Media removed from gallery"),
        ("Error", "Not allowed"),
    ]


@pytest.mark.asyncio
async def test_add_is_refused_while_pending(gallery, actions):
    release = asyncio.Event()

    async def slow_update(group_id, entry):
        await release.wait()
        return ok()

    actions.update_group_gallery.side_effect = slow_update

    first = asyncio.ensure_future(gallery.add(videourl="https://www.youtube.com/embed/abc"))
    await asyncio.sleep(0)
    assert gallery.is_pending is True
    assert await gallery.add(image=[image("a.png")]) is None

    release.set()
    result = await first
    assert result.ok
    assert gallery.is_pending is False
    assert committed(actions) == [("g1", MediaEntry.embed("https://www.youtube.com/embed/abc"))]


@pytest.mark.asyncio
async def test_remove_is_refused_while_pending(gallery, actions):
    release = asyncio.Event()

    async def slow_remove(group_id, media_id):
        await release.wait()
        return ok()

    actions.remove_group_gallery.side_effect = slow_remove

    first = asyncio.ensure_future(gallery.remove("img-1"))
    await asyncio.sleep(0)
    assert gallery.is_removing is True
    assert await gallery.remove("img-2") is None

    release.set()
    await first
    assert gallery.is_removing is False
    assert actions.remove_group_gallery.await_count == 1


def test_only_owner_manages_gallery():
    group = Group.from_payload(group_payload())

    assert can_manage("owner", group)
    assert not can_manage("visitor", group)
    assert not can_manage("", group)


def test_media_urls_render_by_kind():
    group = Group.from_payload(group_payload(gallery=[
        "img-1",
        {"kind": "EMBED", "ref": "https://www.loom.com/embed/xyz"},
    ]))

    assert media_urls(group, cdn_url="https://cdn.test") == [
        "https://cdn.test/img-1/",
        "https://www.loom.com/embed/xyz",
    ]
