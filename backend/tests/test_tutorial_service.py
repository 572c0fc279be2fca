"""
Tutorial API - Tutorial Service Unit Tests
==========================================

What:  Tests for TutorialService against a mocked Motor collection.
How:   Each test configures the collection double, calls the service, and
       checks both the returned value and the query sent to the collection.
"""

import re
from unittest.mock import MagicMock

import bson
import pytest
from bson import ObjectId
from bson.codec_options import CodecOptions
from pymongo import ASCENDING
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from tutorial_api.exceptions import DatabaseError, NotFoundError
from tutorial_api.schemas.tutorial import TutorialCreate, TutorialUpdate
from tutorial_api.services.tutorial_service import TutorialService, build_title_filter


def _matches(query, title):
    """Evaluate a build_title_filter() query the way MongoDB would."""
    if not query:
        return True
    condition = query["title"]
    flags = re.IGNORECASE if "i" in condition["$options"] else 0
    return re.search(condition["$regex"], title, flags) is not None


class TestTitleFilter:
    """Tests for the case-insensitive substring filter."""

    def test_none_means_all(self):
        assert build_title_filter(None) == {}

    def test_empty_and_blank_mean_all(self):
        assert build_title_filter("") == {}
        assert build_title_filter("   ") == {}

    def test_substring_is_case_insensitive(self):
        query = build_title_filter("learn")
        assert query["title"]["$options"] == "i"
        assert _matches(query, "Learn X")
        assert _matches(query, "Learn Y")
        assert _matches(query, "Machine LEARNING basics")
        assert not _matches(query, "Intro to Go")

    def test_regex_metacharacters_are_literal(self):
        """'C++' must match the text C++, not 'one or more C'."""
        query = build_title_filter("C++")
        assert _matches(query, "Modern c++ idioms")
        assert not _matches(query, "CCC")

        dotted = build_title_filter("v1.0")
        assert _matches(dotted, "Release v1.0")
        assert not _matches(dotted, "Release v100")


class TestTutorialServiceCreate:

    @pytest.mark.asyncio
    async def test_create_returns_record_with_generated_id(self, mock_collection):
        """Created record echoes the input and carries the inserted id."""
        inserted_id = ObjectId()
        mock_collection.insert_one.return_value = MagicMock(inserted_id=inserted_id)
        service = TutorialService(mock_collection)

        result = await service.create(
            TutorialCreate(title="Learn X", description="basics", published=True)
        )

        assert result.id == str(inserted_id)
        assert result.title == "Learn X"
        assert result.description == "basics"
        assert result.published is True
        assert result.created_at == result.updated_at

        (doc,), _ = mock_collection.insert_one.call_args
        assert "_id" not in doc
        assert doc["title"] == "Learn X"
        assert doc["published"] is True

    @pytest.mark.asyncio
    async def test_create_defaults(self, mock_collection):
        """published defaults to False, description to None."""
        mock_collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())
        service = TutorialService(mock_collection)

        result = await service.create(TutorialCreate(title="Learn Y"))

        assert result.published is False
        assert result.description is None

    @pytest.mark.asyncio
    async def test_create_ids_are_unique(self, mock_collection):
        mock_collection.insert_one.side_effect = [
            MagicMock(inserted_id=ObjectId()),
            MagicMock(inserted_id=ObjectId()),
        ]
        service = TutorialService(mock_collection)

        first = await service.create(TutorialCreate(title="A"))
        second = await service.create(TutorialCreate(title="B"))

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_create_database_failure(self, mock_collection):
        """Driver errors surface as DatabaseError with the driver message."""
        mock_collection.insert_one.side_effect = PyMongoError("write concern failed")
        service = TutorialService(mock_collection)

        with pytest.raises(DatabaseError, match="write concern failed"):
            await service.create(TutorialCreate(title="Learn X"))


    @pytest.mark.asyncio
    async def test_created_record_reads_back_unchanged(self, mock_collection):
        """What create() returns matches what find_by_id() returns after BSON storage."""
        inserted_id = ObjectId()
        mock_collection.insert_one.return_value = MagicMock(inserted_id=inserted_id)
        service = TutorialService(mock_collection)

        created = await service.create(TutorialCreate(title="Learn X", description="basics"))

        (doc,), _ = mock_collection.insert_one.call_args
        stored = bson.decode(
            bson.encode(dict(doc, _id=inserted_id)),
            codec_options=CodecOptions(tz_aware=True),
        )
        mock_collection.find_one.return_value = stored

        fetched = await service.find_by_id(created.id)

        assert fetched.model_dump_json() == created.model_dump_json()


class TestTutorialServiceRead:

    @pytest.mark.asyncio
    async def test_find_by_id_found(self, mock_collection, sample_doc):
        mock_collection.find_one.return_value = sample_doc
        service = TutorialService(mock_collection)

        result = await service.find_by_id(str(sample_doc["_id"]))

        assert result.id == str(sample_doc["_id"])
        assert result.title == sample_doc["title"]
        assert result.description == sample_doc["description"]
        assert result.published is False
        mock_collection.find_one.assert_awaited_once_with({"_id": sample_doc["_id"]})

    @pytest.mark.asyncio
    async def test_find_by_id_never_issued(self, mock_collection):
        mock_collection.find_one.return_value = None
        service = TutorialService(mock_collection)

        with pytest.raises(NotFoundError, match="Not found Tutorial"):
            await service.find_by_id(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_find_by_id_malformed_id_is_not_found(self, mock_collection):
        """A string that is not an ObjectId can never match; no query is sent."""
        service = TutorialService(mock_collection)

        with pytest.raises(NotFoundError):
            await service.find_by_id("not-an-object-id")

        mock_collection.find_one.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_find_all_without_filter(self, mock_collection, sample_doc):
        mock_collection.find.return_value.to_list.return_value = [sample_doc]
        service = TutorialService(mock_collection)

        result = await service.find_all()

        assert [t.id for t in result] == [str(sample_doc["_id"])]
        mock_collection.find.assert_called_once_with({})
        mock_collection.find.return_value.sort.assert_called_once_with("_id", ASCENDING)

    @pytest.mark.asyncio
    async def test_find_all_with_title_filter(self, mock_collection):
        service = TutorialService(mock_collection)

        await service.find_all("learn")

        (query,), _ = mock_collection.find.call_args
        assert query == {"title": {"$regex": "learn", "$options": "i"}}

    @pytest.mark.asyncio
    async def test_find_all_published(self, mock_collection, sample_doc):
        published = dict(sample_doc, _id=ObjectId(), title="Learn Y", published=True)
        mock_collection.find.return_value.to_list.return_value = [published]
        service = TutorialService(mock_collection)

        result = await service.find_all_published()

        mock_collection.find.assert_called_once_with({"published": True})
        assert len(result) == 1
        assert result[0].title == "Learn Y"
        assert result[0].published is True

    @pytest.mark.asyncio
    async def test_find_all_database_failure(self, mock_collection):
        mock_collection.find.return_value.to_list.side_effect = ServerSelectionTimeoutError(
            "localhost:27017: connection refused"
        )
        service = TutorialService(mock_collection)

        with pytest.raises(DatabaseError, match="connection refused"):
            await service.find_all()


class TestTutorialServiceUpdate:

    @pytest.mark.asyncio
    async def test_update_sets_only_supplied_fields(self, mock_collection, sample_doc):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)
        service = TutorialService(mock_collection)

        result = await service.update(
            str(sample_doc["_id"]), TutorialUpdate(published=True)
        )

        assert result is True
        (query, update), _ = mock_collection.update_one.call_args
        assert query == {"_id": sample_doc["_id"]}
        assert set(update["$set"]) == {"published", "updated_at"}
        assert update["$set"]["published"] is True

    @pytest.mark.asyncio
    async def test_update_ignores_explicit_nulls(self, mock_collection, sample_doc):
        mock_collection.update_one.return_value = MagicMock(matched_count=1)
        service = TutorialService(mock_collection)

        await service.update(
            str(sample_doc["_id"]),
            TutorialUpdate.model_validate({"title": "New", "description": None}),
        )

        (_, update), _ = mock_collection.update_one.call_args
        assert set(update["$set"]) == {"title", "updated_at"}

    @pytest.mark.asyncio
    async def test_update_missing_id(self, mock_collection):
        mock_collection.update_one.return_value = MagicMock(matched_count=0)
        service = TutorialService(mock_collection)

        with pytest.raises(NotFoundError, match="Cannot update Tutorial"):
            await service.update(str(ObjectId()), TutorialUpdate(title="x"))

    @pytest.mark.asyncio
    async def test_update_malformed_id(self, mock_collection):
        service = TutorialService(mock_collection)

        with pytest.raises(NotFoundError):
            await service.update("123", TutorialUpdate(title="x"))

        mock_collection.update_one.assert_not_awaited()


class TestTutorialServiceDelete:

    @pytest.mark.asyncio
    async def test_delete_by_id(self, mock_collection, sample_doc):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=1)
        service = TutorialService(mock_collection)

        await service.delete_by_id(str(sample_doc["_id"]))

        mock_collection.delete_one.assert_awaited_once_with({"_id": sample_doc["_id"]})

    @pytest.mark.asyncio
    async def test_delete_by_id_missing(self, mock_collection):
        mock_collection.delete_one.return_value = MagicMock(deleted_count=0)
        service = TutorialService(mock_collection)

        with pytest.raises(NotFoundError, match="Cannot delete Tutorial"):
            await service.delete_by_id(str(ObjectId()))

    @pytest.mark.asyncio
    async def test_delete_all_returns_count(self, mock_collection):
        mock_collection.delete_many.return_value = MagicMock(deleted_count=3)
        service = TutorialService(mock_collection)

        assert await service.delete_all() == 3
        mock_collection.delete_many.assert_awaited_once_with({})

    @pytest.mark.asyncio
    async def test_delete_all_on_empty_collection(self, mock_collection):
        mock_collection.delete_many.return_value = MagicMock(deleted_count=0)
        service = TutorialService(mock_collection)

        assert await service.delete_all() == 0
