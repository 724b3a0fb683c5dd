"""Admin endpoints for curated feed entries."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header

from pulse.api.deps import get_curation_service
from pulse.api.ops import require_admin
from pulse.domain.feed.curation import CurationService
from pulse.domain.feed.models import CurationEntry, CurationUpsert

router = APIRouter(prefix="/admin/curation", tags=["curation"], dependencies=[Depends(require_admin)])


@router.get("", response_model=list[CurationEntry])
async def list_curation(service: CurationService = Depends(get_curation_service)) -> list[CurationEntry]:
	return await service.list_entries()


@router.put("/{target_id}", response_model=CurationEntry)
async def upsert_curation(
	target_id: str,
	payload: CurationUpsert,
	x_admin_id: Optional[str] = Header(default=None, alias="X-Admin-Id"),
	service: CurationService = Depends(get_curation_service),
) -> CurationEntry:
	admin_id = (x_admin_id or "").strip() or "admin"
	return await service.upsert(target_id, payload, admin_id=admin_id)
