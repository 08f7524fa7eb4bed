"""Campaign and scenario repositories.

The HTTP layer depends on the ``CampaignRepository`` / ``ScenarioRepository``
protocols and receives an implementation through FastAPI dependencies. The
generator never touches a repository; it only sees plain ``ScenarioInput`` and
``LegacyCampaignContext`` values.
"""
from __future__ import annotations

import logging
import secrets
import string
import threading
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Protocol

from backend.app.constants import SCENARIO_HISTORY_MAX
from backend.app.models.campaign import CampaignMode, EpisodeMeta
from backend.app.models.records import CampaignRecord, ScenarioRecord
from backend.app.models.scenario import ScenarioInput

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits
_CODE_LENGTH = 6


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_invite_code(length: int = _CODE_LENGTH) -> str:
    """Short uppercase join code for sharing a campaign."""
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


class CampaignRepository(Protocol):
    def create(
        self,
        name: str,
        tone: str | None = None,
        mode: CampaignMode = "planetary",
        planet_name: str | None = None,
    ) -> CampaignRecord: ...

    def get(self, campaign_id: str) -> CampaignRecord | None: ...

    def list_campaigns(self) -> list[CampaignRecord]: ...

    def append_episode(self, campaign_id: str, episode: EpisodeMeta) -> CampaignRecord | None: ...

    def link_scenario(self, campaign_id: str, scenario_id: str) -> None: ...


class ScenarioRepository(Protocol):
    def save(
        self,
        data: ScenarioInput,
        narrative: str,
        ai_used: bool,
        campaign_id: str | None = None,
    ) -> ScenarioRecord: ...

    def get(self, scenario_id: str) -> ScenarioRecord | None: ...

    def list_scenarios(self, campaign_id: str | None = None) -> list[ScenarioRecord]: ...


class InMemoryCampaignRepository:
    """Process-local campaign store. Episodes are only ever appended."""

    def __init__(self) -> None:
        self._campaigns: dict[str, CampaignRecord] = {}
        self._lock = threading.Lock()

    def create(
        self,
        name: str,
        tone: str | None = None,
        mode: CampaignMode = "planetary",
        planet_name: str | None = None,
    ) -> CampaignRecord:
        record = CampaignRecord(
            id=str(uuid.uuid4()),
            code=new_invite_code(),
            name=name,
            tone=tone,
            mode=mode,
            planet_name=planet_name,
            created_at=_now_iso(),
        )
        with self._lock:
            self._campaigns[record.id] = record
        logger.info("Created campaign %s (%s, mode=%s)", record.id, record.name, record.mode)
        return record

    def get(self, campaign_id: str) -> CampaignRecord | None:
        with self._lock:
            return self._campaigns.get(campaign_id)

    def list_campaigns(self) -> list[CampaignRecord]:
        with self._lock:
            records = list(self._campaigns.values())
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def append_episode(self, campaign_id: str, episode: EpisodeMeta) -> CampaignRecord | None:
        with self._lock:
            record = self._campaigns.get(campaign_id)
            if record is None:
                return None
            updated = record.model_copy(update={"episodes": [*record.episodes, episode]})
            self._campaigns[campaign_id] = updated
        return updated

    def link_scenario(self, campaign_id: str, scenario_id: str) -> None:
        with self._lock:
            record = self._campaigns.get(campaign_id)
            if record is None:
                return
            self._campaigns[campaign_id] = record.model_copy(
                update={"scenario_ids": [*record.scenario_ids, scenario_id]}
            )


class InMemoryScenarioRepository:
    """Scenario history, newest first, capped at ``max_items``."""

    def __init__(self, max_items: int = SCENARIO_HISTORY_MAX) -> None:
        self._items: OrderedDict[str, ScenarioRecord] = OrderedDict()
        self._max_items = max_items
        self._lock = threading.Lock()

    def save(
        self,
        data: ScenarioInput,
        narrative: str,
        ai_used: bool,
        campaign_id: str | None = None,
    ) -> ScenarioRecord:
        record = ScenarioRecord(
            id=str(uuid.uuid4()),
            created_at=_now_iso(),
            campaign_id=campaign_id,
            input=data,
            narrative=narrative,
            ai_used=ai_used,
        )
        with self._lock:
            self._items[record.id] = record
            self._items.move_to_end(record.id, last=False)
            while len(self._items) > self._max_items:
                self._items.popitem(last=True)
        return record

    def get(self, scenario_id: str) -> ScenarioRecord | None:
        with self._lock:
            return self._items.get(scenario_id)

    def list_scenarios(self, campaign_id: str | None = None) -> list[ScenarioRecord]:
        with self._lock:
            items = list(self._items.values())
        if campaign_id is not None:
            items = [r for r in items if r.campaign_id == campaign_id]
        return items
