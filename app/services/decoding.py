"""JSON 컬럼/행을 스키마로 검증하는 경계 디코딩"""
import logging
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)
R = TypeVar("R")


def decode_list(model: type[M], raw: Any) -> list[M]:
    """JSON 배열을 항목 스키마로 검증 (배열이 아니거나 항목이 잘못되면 ValueError/ValidationError)"""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError(f"expected a JSON array, got {type(raw).__name__}")
    return [model.model_validate(item) for item in raw]


def decode_rows(rows: Iterable[Any], build: Callable[[Any], R], table: str) -> list[R]:
    """행마다 build를 적용하고, 형식이 잘못된 행은 경고 로그 후 제외"""
    decoded = []
    for row in rows:
        try:
            decoded.append(build(row))
        except (ValidationError, ValueError) as e:
            logger.warning(
                f"형식이 잘못된 행 제외: table={table}, id={getattr(row, 'id', None)}, "
                f"error={e.__class__.__name__}"
            )
    return decoded
