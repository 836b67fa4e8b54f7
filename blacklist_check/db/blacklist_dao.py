"""
Blacklist Data Access Object.

Backs both providers the resolution engine consumes:
- exact lookup by NIK
- trigram similarity search over names (optionally narrowed by birth
  date and birth place)
"""

import logging
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Optional

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

from ..models.blacklist import CandidateRecord
from ..settings import Settings
from ..utils.name_trigrams import trigram_index_terms, trigram_similarity
from .mongodb import blacklist_collection

logger = logging.getLogger(__name__)


def _date_to_storage(value: Optional[date]) -> Optional[datetime]:
    # BSON has no date type; dates are stored as UTC midnight
    if value is None:
        return None
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _date_from_storage(value: Any) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


class BlacklistDAO:
    """MongoDB Data Access Object for blacklist records."""

    def __init__(
        self,
        database: Optional[AsyncIOMotorDatabase] = None,
        collection: Optional[AsyncIOMotorCollection] = None,
        similarity_threshold: float = 0.3,
        max_candidates: int = 5,
        scan_limit: int = 1000,
    ) -> None:
        """
        Initialize DAO with a MongoDB collection.

        :param database: MongoDB database instance (optional)
        :param collection: Blacklist collection (optional, takes precedence)
        :param similarity_threshold: Scores must be strictly above this value
        :param max_candidates: Maximum number of candidates per search
        :param scan_limit: Maximum best-ranked documents scored per search
        """
        if collection is not None:
            self.collection = collection
        else:
            self.collection = blacklist_collection(database)
        self.similarity_threshold = similarity_threshold
        self.max_candidates = max_candidates
        self.scan_limit = scan_limit

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        database: Optional[AsyncIOMotorDatabase] = None,
    ) -> "BlacklistDAO":
        """Create DAO instance configured from application settings."""
        return cls(
            database=database,
            similarity_threshold=settings.similarity_threshold,
            max_candidates=settings.similarity_max_candidates,
            scan_limit=settings.similarity_scan_limit,
        )

    # ========== Exact lookup ==========

    async def find_by_nik(self, nik: str) -> Optional[CandidateRecord]:
        """
        Find a blacklist record by NIK.

        :param nik: National identity number
        :return: Record if found, None otherwise
        """
        document = await self.collection.find_one({"nik": nik})
        if document is None:
            return None
        return self._to_record(document)

    # ========== Similarity search ==========

    async def find_similar(
        self,
        name: str,
        birth_place: Optional[str] = None,
        birth_date: Optional[date] = None,
    ) -> List[CandidateRecord]:
        """
        Find records whose name is similar to the query.

        The birth date, when given, must match exactly; the birth place,
        when given, must itself be similar above the threshold.

        :param name: Name to search for
        :param birth_place: Optional birth place used to narrow candidates
        :param birth_date: Optional birth date used to narrow candidates
        :return: At most max_candidates records, best score first
        """
        query_trigrams = trigram_index_terms(name)
        if not query_trigrams:
            return []

        cursor = self.collection.aggregate(
            self._similarity_pipeline(query_trigrams, birth_date),
        )
        documents = await cursor.to_list(length=self.scan_limit)

        scored = []
        for document in documents:
            score = trigram_similarity(name, document.get("name") or "")
            if score <= self.similarity_threshold:
                continue
            if birth_place:
                place_score = trigram_similarity(birth_place, document.get("birth_place") or "")
                if place_score <= self.similarity_threshold:
                    continue
            scored.append((score, document))

        # stable sort keeps the pipeline order (_id) for equal scores
        scored.sort(key=lambda item: item[0], reverse=True)

        candidates = [
            self._to_record(document, similarity_score=score)
            for score, document in scored[: self.max_candidates]
        ]
        logger.debug(
            f"Similarity search for '{name}' scanned {len(documents)} documents, "
            f"returned {len(candidates)} candidates",
        )
        return candidates

    def _similarity_pipeline(
        self,
        query_trigrams: List[str],
        birth_date: Optional[date],
    ) -> List[Dict[str, Any]]:
        """
        Build the aggregation that ranks records by name similarity.

        The stored name_trigrams are the same sets trigram_similarity
        compares, so the score computed here equals the Python score and
        the scan limit only ever drops the weakest matches.
        """
        prefilter: Dict[str, Any] = {"name_trigrams": {"$in": query_trigrams}}
        if birth_date is not None:
            prefilter["birth_date"] = _date_to_storage(birth_date)

        overlap = {"$size": {"$setIntersection": ["$name_trigrams", query_trigrams]}}
        union = {
            "$subtract": [
                {"$add": [{"$size": "$name_trigrams"}, len(query_trigrams)]},
                "$trigram_overlap",
            ],
        }
        return [
            {"$match": prefilter},
            {"$addFields": {"trigram_overlap": overlap}},
            {"$addFields": {"name_similarity": {"$divide": ["$trigram_overlap", union]}}},
            {"$match": {"name_similarity": {"$gt": self.similarity_threshold}}},
            {"$sort": {"name_similarity": DESCENDING, "_id": ASCENDING}},
            {"$limit": self.scan_limit},
            {"$project": {"trigram_overlap": 0, "name_trigrams": 0}},
        ]

    async def search_by_name(self, name: str) -> List[CandidateRecord]:
        """Name-only similarity search."""
        return await self.find_similar(name)

    # ========== Maintenance ==========

    async def upsert_record(self, record: CandidateRecord) -> str:
        """
        Insert or update a blacklist record.

        Records with a NIK are keyed by NIK; records without one are keyed
        by name and birth date.

        :param record: Record to store
        :return: "inserted" or "updated"
        """
        now = datetime.now(timezone.utc)
        if record.nik:
            selector: Dict[str, Any] = {"nik": record.nik}
        else:
            selector = {
                "nik": None,
                "name": record.name,
                "birth_date": _date_to_storage(record.birth_date),
            }

        fields = {
            "nik": record.nik,
            "name": record.name,
            "birth_place": record.birth_place,
            "birth_date": _date_to_storage(record.birth_date),
            "reason": record.reason,
            "name_trigrams": trigram_index_terms(record.name),
            "updated_at": now,
        }
        result = await self.collection.update_one(
            selector,
            {"$set": fields, "$setOnInsert": {"created_at": now}},
            upsert=True,
        )
        return "inserted" if result.upserted_id is not None else "updated"

    async def ping(self) -> bool:
        """Check the backing database answers."""
        await self.collection.database.command("ping")
        return True

    @staticmethod
    def _to_record(
        document: Dict[str, Any],
        similarity_score: Optional[float] = None,
    ) -> CandidateRecord:
        return CandidateRecord(
            nik=document.get("nik"),
            name=document.get("name") or "",
            birth_place=document.get("birth_place"),
            birth_date=_date_from_storage(document.get("birth_date")),
            reason=document.get("reason") or "",
            similarity_score=similarity_score,
        )
