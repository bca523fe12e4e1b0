"""
Selector Repair Router

Endpoints:
    POST /repair-selector - Generate a replacement CSS/XPath selector
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from apps.services.change_ai.dependencies import get_selector_repair
from apps.services.change_ai.schemas import RepairSelectorRequest
from apps.services.change_ai.services import SelectorRepairService
from apps.services.change_ai.utils import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["repair"])


@router.post("/repair-selector")
async def repair_selector(
    body: Optional[RepairSelectorRequest] = None,
    repair: SelectorRepairService = Depends(get_selector_repair),
) -> Dict[str, Any]:
    if body is None:
        body = RepairSelectorRequest()
    require_fields(html=body.html, targetDescription=body.target_description)

    logger.info(f"Repairing selector for: {body.target_description}")
    result = await repair.repair_selector(
        body.html,
        body.target_description,
        body.old_selector,
        body.selector_type,
    )
    return result.to_dict()
