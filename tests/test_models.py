"""Tests for record normalization, metadata parsing and formatting."""

from collections import namedtuple

import pytest

from aggregator.eth.abi_loader import get_crowdfunding_abi, get_output_names
from aggregator.models import CampaignMetadata, CampaignRecord, MetadataUpload
from aggregator.utils.formatting import format_ether, strip_ipfs_scheme, to_ipfs_uri

CREATOR = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"


@pytest.fixture
def campaign_fields():
    return get_output_names(get_crowdfunding_abi(), "getCampaign")


def test_campaign_fields_from_abi(campaign_fields):
    """getCampaign's struct components are used as field names."""
    assert campaign_fields[:3] == ["creator", "title", "description"]
    assert "raisedAmount" in campaign_fields
    assert "deadline" in campaign_fields


def test_record_from_positional_tuple(campaign_fields):
    """A plain tuple result is named by ABI position."""
    raw = (CREATOR, "Title", "Desc", "", "", 10 ** 19, 2 * 10 ** 18, 1735689600, False)

    record = CampaignRecord.from_contract(4, raw, campaign_fields)

    assert record.id == 4
    assert record.creator == CREATOR
    assert record.goal == 10 ** 19
    assert record.raised == 2 * 10 ** 18
    assert record.deadline == 1735689600


def test_record_from_mapping_with_raised():
    """Mappings may carry ``raised`` instead of ``raisedAmount``."""
    raw = {"creator": CREATOR, "title": "T", "description": "D", "goal": 100, "raised": 40, "deadline": 5}

    record = CampaignRecord.from_contract(1, raw)

    assert record.raised == 40


def test_record_from_named_tuple():
    """Named tuples are read by field name."""
    Campaign = namedtuple("Campaign", "creator title description goal raisedAmount deadline")
    raw = Campaign(CREATOR, "T", "D", 100, 60, 5)

    record = CampaignRecord.from_contract(2, raw)

    assert record.raised == 60
    assert record.title == "T"


def test_metadata_from_raw_with_alternative_keys():
    """Alternative key names are mapped onto the metadata fields."""
    raw = {
        "campaignId": 9,
        "name": "Reef",
        "description": "Coral restoration",
        "image": "https://img.test/reef.png",
        "animation_url": "https://video.test/reef",
        "goal": 1.5,
        "deadline": "1735689600",
        "unexpected": "ignored",
    }

    metadata = CampaignMetadata.from_raw(raw)

    assert metadata.campaign_id == "9"
    assert metadata.title == "Reef"
    assert metadata.image_url == "https://img.test/reef.png"
    assert metadata.video_url == "https://video.test/reef"
    assert metadata.goal == "1.5"
    assert metadata.deadline == 1735689600
    assert metadata.created_at is None


def test_metadata_from_raw_missing_fields_are_empty():
    """Absent fields default to empty strings, never None."""
    metadata = CampaignMetadata.from_raw({})

    assert metadata.title == ""
    assert metadata.image_url == ""
    assert metadata.video_url == ""


def test_upload_content_adds_created_at():
    """The pinned document carries camelCase keys and createdAt."""
    upload = MetadataUpload.model_validate({"campaignId": 3, "title": "T", "goal": "2"})

    content = upload.to_content(created_at=123)

    assert content["campaignId"] == "3"
    assert content["createdAt"] == 123
    assert content["imageUrl"] == ""


@pytest.mark.parametrize("wei,expected", [
    (0, "0.0"),
    (10 ** 18, "1.0"),
    (15 * 10 ** 17, "1.5"),
    (1, "0.000000000000000001"),
    (1234 * 10 ** 18, "1234.0"),
])
def test_format_ether(wei, expected):
    assert format_ether(wei) == expected


def test_ipfs_uri_helpers():
    """Scheme-prefixed and bare addresses normalize to the same hash."""
    assert strip_ipfs_scheme("ipfs://QmHash") == "QmHash"
    assert strip_ipfs_scheme("QmHash") == "QmHash"
    assert to_ipfs_uri("QmHash") == "ipfs://QmHash"
    assert to_ipfs_uri("ipfs://QmHash") == "ipfs://QmHash"


@pytest.mark.parametrize("value,expected", [
    ("2025-06-01", None),
    (1735689600.5, 1735689600),
    ("1735689600", 1735689600),
    (True, None),
    ({"at": 1}, None),
])
def test_metadata_deadline_is_lenient(value, expected):
    """Unreadable informational timestamps become None instead of failing."""
    metadata = CampaignMetadata.from_raw({
        "title": "Stored",
        "imageUrl": "https://img.test/x.png",
        "deadline": value,
        "createdAt": value,
    })

    assert metadata.deadline == expected
    assert metadata.created_at == expected
    assert metadata.image_url == "https://img.test/x.png"


def test_metadata_scalar_text_fields_are_stringified():
    metadata = CampaignMetadata.from_raw({"title": 2024, "description": 1.5, "videoUrl": ["x"]})

    assert metadata.title == "2024"
    assert metadata.description == "1.5"
    assert metadata.video_url == ""
