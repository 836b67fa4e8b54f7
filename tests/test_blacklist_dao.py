"""
Tests for the MongoDB blacklist DAO, against a mocked motor collection.

Similarity searches run the DAO's aggregation pipeline over in-memory
documents, evaluating only the stages and operators the DAO emits.
"""

from datetime import date, datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from blacklist_check.db.blacklist_dao import BlacklistDAO
from blacklist_check.models.blacklist import CandidateRecord, CheckRequest, MatchKind
from blacklist_check.services.blacklist_matcher import MatchResolutionEngine
from blacklist_check.settings import Settings
from blacklist_check.utils.name_trigrams import trigram_index_terms, trigram_similarity

MIDNIGHT_1990 = datetime(1990, 1, 1, tzinfo=timezone.utc)


def document(name, birth_place="Jakarta", birth_date=MIDNIGHT_1990, reason="fraud", nik=None, _id=None):
    return {
        "_id": _id or f"{name}|{reason}",
        "nik": nik,
        "name": name,
        "birth_place": birth_place,
        "birth_date": birth_date,
        "reason": reason,
        "name_trigrams": trigram_index_terms(name),
    }


def evaluate(expression, doc):
    if isinstance(expression, str) and expression.startswith("$"):
        return doc[expression[1:]]
    if not isinstance(expression, dict):
        return expression

    (operator, args), = expression.items()
    if isinstance(args, list):
        values = [evaluate(arg, doc) for arg in args]
    else:
        values = evaluate(args, doc)

    if operator == "$size":
        return len(values)
    if operator == "$setIntersection":
        return set(values[0]) & set(values[1])
    if operator == "$add":
        return sum(values)
    if operator == "$subtract":
        return values[0] - values[1]
    if operator == "$divide":
        return values[0] / values[1]
    raise AssertionError(f"unexpected operator {operator}")


def matches(doc, query):
    for field, condition in query.items():
        value = doc.get(field)
        if isinstance(condition, dict) and "$in" in condition:
            if not set(value or []) & set(condition["$in"]):
                return False
        elif isinstance(condition, dict) and "$gt" in condition:
            if not value > condition["$gt"]:
                return False
        elif value != condition:
            return False
    return True


def run_pipeline(pipeline, documents):
    docs = [dict(doc) for doc in documents]
    for stage in pipeline:
        (name, spec), = stage.items()
        if name == "$match":
            docs = [doc for doc in docs if matches(doc, spec)]
        elif name == "$addFields":
            for doc in docs:
                doc.update({field: evaluate(expr, doc) for field, expr in spec.items()})
        elif name == "$sort":
            for field, direction in reversed(list(spec.items())):
                docs.sort(key=lambda doc: doc[field], reverse=direction < 0)
        elif name == "$limit":
            docs = docs[:spec]
        elif name == "$project":
            docs = [{k: v for k, v in doc.items() if spec.get(k, 1)} for doc in docs]
        else:
            raise AssertionError(f"unexpected stage {name}")
    return docs


def mock_collection(documents=None, find_one_result=None):
    collection = MagicMock()
    collection.pipelines = []

    def aggregate(pipeline):
        collection.pipelines.append(pipeline)
        cursor = MagicMock()
        cursor.to_list = AsyncMock(return_value=run_pipeline(pipeline, documents or []))
        return cursor

    collection.aggregate.side_effect = aggregate
    collection.find_one = AsyncMock(return_value=find_one_result)
    collection.update_one = AsyncMock()
    collection.database.command = AsyncMock(return_value={"ok": 1})
    return collection


class TestFindByNik:
    async def test_found(self):
        collection = mock_collection(find_one_result=document("John Doe", nik="1234567890123456", reason="court order"))
        dao = BlacklistDAO(collection=collection)

        record = await dao.find_by_nik("1234567890123456")

        collection.find_one.assert_awaited_once_with({"nik": "1234567890123456"})
        assert record == CandidateRecord(
            nik="1234567890123456",
            name="John Doe",
            birth_place="Jakarta",
            birth_date=date(1990, 1, 1),
            reason="court order",
        )
        assert record.similarity_score is None

    async def test_not_found(self):
        dao = BlacklistDAO(collection=mock_collection())
        assert await dao.find_by_nik("0000000000000000") is None

    async def test_errors_propagate(self):
        collection = mock_collection()
        collection.find_one.side_effect = ServerSelectionTimeoutError("down")
        dao = BlacklistDAO(collection=collection)

        with pytest.raises(ServerSelectionTimeoutError):
            await dao.find_by_nik("1234567890123456")


class TestFindSimilar:
    async def test_ranked_above_threshold(self):
        collection = mock_collection([
            document("Jon Doe", reason="second"),
            document("Siti Rahayu", reason="unrelated"),
            document("John Doe", reason="first"),
        ])
        dao = BlacklistDAO(collection=collection)

        candidates = await dao.find_similar("John Doe")

        assert [c.reason for c in candidates] == ["first", "second"]
        assert candidates[0].similarity_score == 1.0
        assert candidates[1].similarity_score == pytest.approx(6 / 11)
        assert all(c.similarity_score > 0.3 for c in candidates)

    async def test_truncated_to_max_candidates(self):
        collection = mock_collection([document("John Doe", reason=str(i)) for i in range(8)])
        dao = BlacklistDAO(collection=collection, max_candidates=5)

        candidates = await dao.find_similar("John Doe")

        assert [c.reason for c in candidates] == ["0", "1", "2", "3", "4"]

    async def test_score_equal_to_threshold_is_excluded(self):
        collection = mock_collection([document("Jon Doe")])
        dao = BlacklistDAO(collection=collection, similarity_threshold=6 / 11)

        assert await dao.find_similar("John Doe") == []

    def test_aggregation_score_equals_trigram_similarity(self):
        doc = document("Budi Santoso")
        pipeline = BlacklistDAO(collection=mock_collection())._similarity_pipeline(
            trigram_index_terms("Budi Susanto"),
            None,
        )

        ranked = run_pipeline(pipeline[:3], [doc])

        assert ranked[0]["name_similarity"] == trigram_similarity("Budi Susanto", "Budi Santoso")

    async def test_scan_limit_applies_after_ranking(self):
        # same-date near namesakes stored ahead of the real match
        noise = [
            document(f"John Doe{i}", birth_place="Medan", reason="noise", _id=f"a{i:05d}")
            for i in range(1200)
        ]
        target = document("John Doe", reason="court order", _id="z00000")
        collection = mock_collection(noise + [target])
        dao = BlacklistDAO(collection=collection, scan_limit=1000)

        candidates = await dao.find_similar("John Doe", "Jakarta", date(1990, 1, 1))

        assert [c.reason for c in candidates] == ["court order"]
        stages = [next(iter(stage)) for stage in collection.pipelines[0]]
        assert stages.index("$sort") < stages.index("$limit")

        engine = MatchResolutionEngine(exact_provider=dao, similarity_provider=dao)
        outcome = await engine.classify(
            CheckRequest(name="John Doe", birth_place="Jakarta", birth_date=date(1990, 1, 1)),
        )
        assert outcome.match_kind == MatchKind.FUZZY_FULL
        assert outcome.details == "court order"

    async def test_birth_date_narrows_query(self):
        collection = mock_collection()
        dao = BlacklistDAO(collection=collection, scan_limit=50)

        await dao.find_similar("John Doe", birth_date=date(1990, 1, 1))

        pipeline = collection.pipelines[0]
        prefilter = pipeline[0]["$match"]
        assert prefilter["birth_date"] == MIDNIGHT_1990
        assert set(prefilter["name_trigrams"]["$in"]) == {"  j", " jo", "joh", "ohn", "hn ", "  d", " do", "doe", "oe "}
        assert {"$limit": 50} in pipeline

    async def test_other_birth_dates_are_not_returned(self):
        collection = mock_collection([
            document("John Doe", birth_date=datetime(1991, 1, 1, tzinfo=timezone.utc), reason="1991"),
            document("John Doe", reason="1990"),
        ])
        dao = BlacklistDAO(collection=collection)

        candidates = await dao.find_similar("John Doe", birth_date=date(1990, 1, 1))

        assert [c.reason for c in candidates] == ["1990"]

    async def test_name_only_query_has_no_date_filter(self):
        collection = mock_collection()
        dao = BlacklistDAO(collection=collection)

        await dao.search_by_name("John Doe")

        assert "birth_date" not in collection.pipelines[0][0]["$match"]

    async def test_birth_place_must_be_similar(self):
        collection = mock_collection([
            document("John Doe", birth_place="Surabaya", reason="other city"),
            document("John Doe", birth_place="Jakarta Selatan", reason="same city"),
        ])
        dao = BlacklistDAO(collection=collection)

        candidates = await dao.find_similar("John Doe", birth_place="Jakarta")

        assert [c.reason for c in candidates] == ["same city"]

    async def test_blank_birth_place_does_not_narrow(self):
        collection = mock_collection([document("John Doe", birth_place=None)])
        dao = BlacklistDAO(collection=collection)

        candidates = await dao.find_similar("John Doe", birth_place="")

        assert len(candidates) == 1

    async def test_blank_name_skips_query(self):
        collection = mock_collection()
        dao = BlacklistDAO(collection=collection)

        assert await dao.find_similar("  ") == []
        collection.aggregate.assert_not_called()


class TestUpsertRecord:
    async def test_insert_keyed_by_nik(self):
        collection = mock_collection()
        collection.update_one.return_value = MagicMock(upserted_id="new-id")
        dao = BlacklistDAO(collection=collection)
        record = CandidateRecord(
            nik="1234567890123456",
            name="John Doe",
            birth_place="Jakarta",
            birth_date=date(1990, 1, 1),
            reason="court order",
        )

        assert await dao.upsert_record(record) == "inserted"

        selector, update = collection.update_one.call_args.args
        assert selector == {"nik": "1234567890123456"}
        assert update["$set"]["birth_date"] == MIDNIGHT_1990
        assert "joh" in update["$set"]["name_trigrams"]
        assert "created_at" in update["$setOnInsert"]
        assert collection.update_one.call_args.kwargs["upsert"] is True

    async def test_update_keyed_by_name_and_date_without_nik(self):
        collection = mock_collection()
        collection.update_one.return_value = MagicMock(upserted_id=None)
        dao = BlacklistDAO(collection=collection)
        record = CandidateRecord(name="John Doe", birth_date=date(1990, 1, 1), reason="fraud")

        assert await dao.upsert_record(record) == "updated"

        selector = collection.update_one.call_args.args[0]
        assert selector == {"nik": None, "name": "John Doe", "birth_date": MIDNIGHT_1990}


async def test_ping():
    collection = mock_collection()
    assert await BlacklistDAO(collection=collection).ping() is True
    collection.database.command.assert_awaited_once_with("ping")


def test_from_settings_copies_search_limits():
    settings = Settings(similarity_threshold=0.5, similarity_max_candidates=3, similarity_scan_limit=10)
    dao = BlacklistDAO.from_settings(settings, database={"blacklist": mock_collection()})

    assert (dao.similarity_threshold, dao.max_candidates, dao.scan_limit) == (0.5, 3, 10)
