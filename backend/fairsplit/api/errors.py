"""
业务异常到HTTP错误的转换
"""

import logging
from fastapi import HTTPException
from fairsplit.core.exceptions import FairSplitError

logger = logging.getLogger(__name__)


def to_http_exception(e: FairSplitError) -> HTTPException:
    """保留状态码和错误码，过期的游戏返回410以便前端区分提示"""
    if e.status_code >= 500:
        logger.error("请求失败 [%s]: %s", e.code, e.message)
    else:
        logger.warning("请求被拒绝 [%s]: %s", e.code, e.message)
    return HTTPException(status_code=e.status_code, detail={"code": e.code, "message": e.message})
