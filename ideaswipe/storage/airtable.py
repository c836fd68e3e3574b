"""
Airtable storage backend for Idea Swipe.

Implements both store interfaces using Airtable as the persistence layer.
Every call goes over the Airtable Web API with requests.

Airtable API Documentation: https://airtable.com/developers/web/api/introduction

=============================================================================
AIRTABLE SCHEMA
=============================================================================

Ideas table (AIRTABLE_IDEAS_TABLE, default "Ideas"):

| Column Name    | Field Type      | Description                          |
|----------------|-----------------|--------------------------------------|
| idea_id        | Single line text| Idea UUID (our identifier)           |
| title          | Single line text| Idea title                           |
| description    | Long text       | Idea pitch                           |
| tags           | Multiple select | Normalized topic tags                |
| author_id      | Single line text| Submitting user                      |
| image_ref      | Single line text| Blob store reference (optional)      |
| created_at     | Single line text| ISO timestamp, fixed width, UTC      |

Interactions table (AIRTABLE_INTERACTIONS_TABLE, default "Interactions"):

| Column Name    | Field Type      | Description                          |
|----------------|-----------------|--------------------------------------|
| pair_key       | Single line text| Upsert key: JSON [user_id, idea_id]  |
| user_id        | Single line text| Judging user                         |
| idea_id        | Single line text| Judged idea                          |
| swipe          | Checkbox        | Accepted (checked) or rejected       |
| rating         | Number (integer)| 1-10, optional                       |

An interaction's id and created_at are the Airtable record id and the
record's createdTime, so neither is ever rewritten by an update.

Interactions are written with a single PATCH using "performUpsert" merged
on pair_key. Airtable creates the record when no pair_key matches and
otherwise updates only the fields sent, so omitting "rating" keeps the
stored rating.

=============================================================================
"""

import json
import logging
import time
from typing import Any, Dict, Iterable, List, Optional, Set

import requests

from ideaswipe.config import (
    AIRTABLE_API_KEY,
    AIRTABLE_BASE_ID,
    AIRTABLE_IDEAS_TABLE,
    AIRTABLE_INTERACTIONS_TABLE,
    REQUEST_TIMEOUT,
)
from ideaswipe.errors import ConflictError, NotFoundError, StoreUnavailableError
from ideaswipe.models import (
    Idea,
    IdeaDraft,
    Interaction,
    sort_newest_first,
    validate_judgment,
)
from ideaswipe.models.timestamps import parse_iso, to_iso
from ideaswipe.storage.base import Storage

logger = logging.getLogger(__name__)


def formula_string(value: str) -> str:
    """Quote a value as an Airtable formula string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def make_pair_key(user_id: str, idea_id: str) -> str:
    """Unambiguous merge key for one (user, idea) pair."""
    return json.dumps([user_id, idea_id])


class AirtableStorage(Storage):
    """
    Stores ideas and interactions in two Airtable tables.

    Configuration is pulled from environment variables via ideaswipe.config:
    - AIRTABLE_API_KEY: personal access token
    - AIRTABLE_BASE_ID: base holding both tables ("app...")
    - AIRTABLE_IDEAS_TABLE / AIRTABLE_INTERACTIONS_TABLE: table names
    """

    # Airtable API base URL
    API_BASE = "https://api.airtable.com/v0"

    # Airtable caps each base at 5 requests per second
    REQUEST_DELAY = 0.25

    # Airtable returns at most 100 records per page
    PAGE_SIZE = 100

    # Listing order shared by every idea query
    NEWEST_FIRST = [
        {"field": "created_at", "direction": "desc"},
        {"field": "idea_id", "direction": "asc"},
    ]

    def __init__(
        self,
        api_key: str = None,
        base_id: str = None,
        ideas_table: str = None,
        interactions_table: str = None,
    ):
        """
        Create a client; nothing is sent until the first operation.

        Args:
            api_key: Airtable API key. Defaults to config.AIRTABLE_API_KEY.
            base_id: Airtable base ID. Defaults to config.AIRTABLE_BASE_ID.
            ideas_table: Ideas table name. Defaults to config.AIRTABLE_IDEAS_TABLE.
            interactions_table: Interactions table name.
                Defaults to config.AIRTABLE_INTERACTIONS_TABLE.
        """
        # None means "use config"; an explicit empty string is kept and fails validation
        self.api_key = api_key if api_key is not None else AIRTABLE_API_KEY
        self.base_id = base_id if base_id is not None else AIRTABLE_BASE_ID
        self.ideas_table = ideas_table if ideas_table is not None else AIRTABLE_IDEAS_TABLE
        self.interactions_table = (
            interactions_table if interactions_table is not None else AIRTABLE_INTERACTIONS_TABLE
        )

        self._last_request_time = 0.0

    @property
    def name(self) -> str:
        return "airtable"

    def _table_url(self, table: str) -> str:
        """Construct the base URL for requests against one table."""
        return f"{self.API_BASE}/{self.base_id}/{table}"

    @property
    def _headers(self) -> Dict[str, str]:
        """Auth and content-type headers sent on every call."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _rate_limit(self) -> None:
        """Sleep just long enough to keep REQUEST_DELAY between calls."""
        now = time.time()
        elapsed = now - self._last_request_time
        if elapsed < self.REQUEST_DELAY:
            time.sleep(self.REQUEST_DELAY - elapsed)
        self._last_request_time = time.time()

    def _validate_config(self) -> None:
        """Fail fast with StoreUnavailableError when credentials or tables are missing."""
        if not self.api_key:
            raise StoreUnavailableError("AIRTABLE_API_KEY is not configured")
        if not self.base_id:
            raise StoreUnavailableError("AIRTABLE_BASE_ID is not configured")
        if not self.ideas_table or not self.interactions_table:
            raise StoreUnavailableError("Airtable table names are not configured")

    # =========================================================================
    # Serialization: models <-> Airtable
    # =========================================================================

    @staticmethod
    def idea_to_airtable_fields(idea: Idea) -> Dict[str, Any]:
        """
        Convert an Idea to Airtable field format.

        Args:
            idea: The Idea to convert.

        Returns:
            Field name to value mapping for the Ideas table.
        """
        fields = {
            "idea_id": idea.id,
            "title": idea.title,
            "description": idea.description,
            "tags": list(idea.tags),
            "author_id": idea.author_id,
            "created_at": to_iso(idea.created_at),
        }

        # Airtable rejects null for text fields
        if idea.image_ref:
            fields["image_ref"] = idea.image_ref

        return fields

    @staticmethod
    def airtable_record_to_idea(record: Dict[str, Any]) -> Optional[Idea]:
        """
        Convert an Airtable record to an Idea.

        Args:
            record: Raw record dict as returned by the list endpoint.

        Returns:
            Idea if conversion successful, None for rows missing required fields.
        """
        fields = record.get("fields", {})

        idea_id = fields.get("idea_id")
        title = fields.get("title")
        author_id = fields.get("author_id")

        if not all([idea_id, title, author_id]):
            return None

        try:
            created_at = parse_iso(fields.get("created_at") or record.get("createdTime"))
        except ValueError:
            return None

        if created_at is None:
            return None

        return Idea(
            id=idea_id,
            title=title,
            description=fields.get("description", ""),
            tags=fields.get("tags", []),
            author_id=author_id,
            image_ref=fields.get("image_ref"),
            created_at=created_at,
        )

    @staticmethod
    def interaction_to_airtable_fields(
        user_id: str,
        idea_id: str,
        swipe: bool,
        rating: Optional[int],
    ) -> Dict[str, Any]:
        """
        Build the fields sent for an interaction upsert.

        "rating" is only present when a rating was given.
        """
        fields = {
            "pair_key": make_pair_key(user_id, idea_id),
            "user_id": user_id,
            "idea_id": idea_id,
            "swipe": swipe,
        }
        if rating is not None:
            fields["rating"] = rating
        return fields

    @staticmethod
    def airtable_record_to_interaction(record: Dict[str, Any]) -> Optional[Interaction]:
        """
        Convert an Airtable record to an Interaction.

        Airtable omits unchecked checkboxes and empty numbers, so a missing
        "swipe" means False and a missing "rating" means no rating.
        """
        fields = record.get("fields", {})

        user_id = fields.get("user_id")
        idea_id = fields.get("idea_id")
        if not all([record.get("id"), user_id, idea_id]):
            return None

        try:
            created_at = parse_iso(record.get("createdTime"))
        except ValueError:
            created_at = None

        rating = fields.get("rating")
        interaction = Interaction(
            id=record["id"],
            user_id=user_id,
            idea_id=idea_id,
            swipe=bool(fields.get("swipe", False)),
            rating=int(rating) if rating is not None else None,
        )
        if created_at is not None:
            interaction.created_at = created_at
        return interaction

    # =========================================================================
    # API Operations
    # =========================================================================

    def _request(self, method: str, url: str, payload: Dict[str, Any] = None) -> Dict[str, Any]:
        """
        Send one request and return the decoded JSON body.

        Raises:
            ConflictError: Airtable rejected the write (HTTP 422).
            StoreUnavailableError: Transport failure or any other HTTP error.
        """
        self._validate_config()
        self._rate_limit()

        try:
            response = requests.request(
                method,
                url,
                headers=self._headers,
                json=payload,
                timeout=REQUEST_TIMEOUT,
            )
            response.raise_for_status()
            return response.json()

        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 422:
                raise ConflictError(f"Airtable rejected {method} {url}: {e}") from e
            raise StoreUnavailableError(f"Airtable {method} {url} failed: {e}") from e
        except requests.RequestException as e:
            raise StoreUnavailableError(f"Airtable {method} {url} failed: {e}") from e
        except ValueError as e:
            raise StoreUnavailableError(f"Airtable returned invalid JSON: {e}") from e

    def _list_records(
        self,
        table: str,
        filter_formula: str = None,
        sort: List[Dict[str, str]] = None,
        fields: List[str] = None,
        max_records: int = None,
    ) -> List[Dict]:
        """
        List records from Airtable, following pagination offsets.

        Uses the POST listRecords endpoint so long exclusion formulas do not
        hit URL length limits.

        Args:
            table: Table name.
            filter_formula: filterByFormula expression, or None for every record.
            sort: List of {"field": name, "direction": "asc"|"desc"}.
            fields: Only return these fields.
            max_records: Stop after this many records.

        Returns:
            Raw record dicts from every page.
        """
        url = f"{self._table_url(table)}/listRecords"
        body: Dict[str, Any] = {"pageSize": self.PAGE_SIZE}

        if filter_formula:
            body["filterByFormula"] = filter_formula
        if sort:
            body["sort"] = sort
        if fields:
            body["fields"] = fields
        if max_records:
            body["maxRecords"] = max_records

        records: List[Dict] = []
        while True:
            data = self._request("POST", url, body)
            records.extend(data.get("records", []))

            offset = data.get("offset")
            if not offset or (max_records and len(records) >= max_records):
                break
            body["offset"] = offset

        return records

    def _records_to_ideas(self, records: List[Dict]) -> List[Idea]:
        ideas = []
        for record in records:
            idea = self.airtable_record_to_idea(record)
            if idea:
                ideas.append(idea)
            else:
                logger.warning("Skipping malformed Airtable idea record %s", record.get("id"))
        # Airtable sorted already; re-sort so tie-breaking matches the other backends
        return sort_newest_first(ideas)

    def _records_to_interactions(self, records: List[Dict]) -> List[Interaction]:
        interactions = []
        for record in records:
            interaction = self.airtable_record_to_interaction(record)
            if interaction:
                interactions.append(interaction)
            else:
                logger.warning("Skipping malformed Airtable interaction record %s", record.get("id"))
        return interactions

    # =========================================================================
    # IdeaStore
    # =========================================================================

    def create_idea(self, draft: IdeaDraft) -> Idea:
        idea = Idea.from_draft(draft)

        self._request(
            "POST",
            self._table_url(self.ideas_table),
            {"fields": self.idea_to_airtable_fields(idea), "typecast": True},
        )

        logger.debug("Stored idea %s (airtable)", idea.id)
        return idea

    def list_excluding(self, excluded_ids: Iterable[str]) -> List[Idea]:
        excluded = sorted(set(excluded_ids))

        filter_formula = None
        if excluded:
            clauses = ",".join(f"{{idea_id}}={formula_string(i)}" for i in excluded)
            filter_formula = f"NOT(OR({clauses}))"

        records = self._list_records(
            self.ideas_table,
            filter_formula=filter_formula,
            sort=self.NEWEST_FIRST,
        )
        return self._records_to_ideas(records)

    def list_by_author(self, author_id: str) -> List[Idea]:
        records = self._list_records(
            self.ideas_table,
            filter_formula=f"{{author_id}}={formula_string(author_id)}",
            sort=self.NEWEST_FIRST,
        )
        return self._records_to_ideas(records)

    def get_idea(self, idea_id: str) -> Optional[Idea]:
        records = self._list_records(
            self.ideas_table,
            filter_formula=f"{{idea_id}}={formula_string(idea_id)}",
            max_records=1,
        )
        ideas = self._records_to_ideas(records)
        return ideas[0] if ideas else None

    # =========================================================================
    # InteractionStore
    # =========================================================================

    def upsert_interaction(
        self,
        user_id: str,
        idea_id: str,
        swipe: bool,
        rating: Optional[int] = None,
    ) -> Interaction:
        validate_judgment(user_id, idea_id, swipe, rating)

        if self.get_idea(idea_id) is None:
            raise NotFoundError(f"Idea not found: {idea_id}")

        payload = {
            "performUpsert": {"fieldsToMergeOn": ["pair_key"]},
            "records": [
                {"fields": self.interaction_to_airtable_fields(user_id, idea_id, swipe, rating)}
            ],
            "typecast": True,
        }
        data = self._request("PATCH", self._table_url(self.interactions_table), payload)

        records = data.get("records", [])
        interaction = self.airtable_record_to_interaction(records[0]) if records else None
        if interaction is None:
            raise StoreUnavailableError("Airtable upsert returned no usable record")

        created = interaction.id in data.get("createdRecords", [])
        logger.debug(
            "%s interaction %s for idea %s (airtable)",
            "Inserted" if created else "Updated", interaction.id, idea_id,
        )
        return interaction

    def get_for_user(self, idea_id: str, user_id: str) -> Optional[Interaction]:
        records = self._list_records(
            self.interactions_table,
            filter_formula=f"{{pair_key}}={formula_string(make_pair_key(user_id, idea_id))}",
            max_records=1,
        )
        interactions = self._records_to_interactions(records)
        return interactions[0] if interactions else None

    def get_all_for_idea(self, idea_id: str) -> List[Interaction]:
        records = self._list_records(
            self.interactions_table,
            filter_formula=f"{{idea_id}}={formula_string(idea_id)}",
        )
        return self._records_to_interactions(records)

    def get_idea_ids_for_user(self, user_id: str) -> Set[str]:
        records = self._list_records(
            self.interactions_table,
            filter_formula=f"{{user_id}}={formula_string(user_id)}",
            fields=["idea_id"],
        )
        return {
            record["fields"]["idea_id"]
            for record in records
            if record.get("fields", {}).get("idea_id")
        }
