"""Tests for payload parsing and form validation."""

import pytest
from pydantic import ValidationError

from grouphub.models.data import ActionResult, Group, MediaEntry, MediaKind, Message
from grouphub.models.forms import AddCustomDomainForm, UpdateGalleryForm, form_errors


@pytest.mark.parametrize("raw, kind", [
    ("5f2b1c3e-uuid", MediaKind.IMAGE),
    ("https://www.youtube.com/embed/abc", MediaKind.EMBED),
    ("https://www.loom.com/embed/xyz", MediaKind.EMBED),
    ({"kind": "IMAGE", "ref": "https://looks-like-a-url"}, MediaKind.IMAGE),
])
def test_media_entry_kind(raw, kind):
    assert MediaEntry.from_payload(raw).kind is kind


def test_media_entry_payload_is_tagged():
    assert MediaEntry.image("abc").to_payload() == {"kind": "IMAGE", "ref": "abc"}


def test_action_result_splits_envelope():
    result = ActionResult.from_payload({"status": 200, "message": "ok", "group": {"id": "g1", "name": "G"}})

    assert result.ok
    assert result.message == "ok"
    assert result.group.id == "g1"
    assert result.groups == []


def test_action_result_without_status_is_failure():
    assert ActionResult.from_payload(None).status == 500


def test_group_parses_legacy_gallery():
    group = Group.from_payload({"id": "g1", "name": "G", "userId": "u1", "gallery": ["img", "https://www.loom.com/embed/x"]})

    assert group.user_id == "u1"
    assert [entry.kind for entry in group.gallery] == [MediaKind.IMAGE, MediaKind.EMBED]


def test_message_participants():
    message = Message.from_payload({"id": "1", "message": "hi", "senderid": "a", "recieverId": "b"})

    assert message.between("b", "a")
    assert not message.between("a", "c")


def test_domain_form_accepts_subdomains():
    assert AddCustomDomainForm(domain="learn.school.example.org").domain == "learn.school.example.org"


def test_form_errors_flatten_messages():
    with pytest.raises(ValidationError) as info:
        UpdateGalleryForm(videourl="https://vimeo.com/1")

    assert form_errors(info.value) == {"videourl": "Invalid url embed link must be from youtube or loom"}
