"""
Change Validation Router

Endpoints:
    POST /validate-change - Judge whether an old -> new value change is meaningful
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends

from apps.services.change_ai.dependencies import get_change_validator
from apps.services.change_ai.schemas import ValidateChangeRequest
from apps.services.change_ai.services import ChangeValidator
from apps.services.change_ai.utils import require_fields

logger = logging.getLogger(__name__)

router = APIRouter(tags=["validate"])


@router.post("/validate-change")
async def validate_change(
    body: Optional[ValidateChangeRequest] = None,
    validator: ChangeValidator = Depends(get_change_validator),
) -> Dict[str, Any]:
    if body is None:
        body = ValidateChangeRequest()
    require_fields(oldValue=body.old_value, newValue=body.new_value)

    logger.info(f"Validating change: {body.old_value} -> {body.new_value} (context: {body.context})")
    result = await validator.validate_change(body.old_value, body.new_value, body.context)
    return result.to_dict()
