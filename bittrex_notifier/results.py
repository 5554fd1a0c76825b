from dataclasses import dataclass
from enum import Enum
from typing import Any


class StageStatus(str, Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"
    FATAL = "fatal"


@dataclass(frozen=True)
class StageResult:
    """
    各阶段的执行结果。

    - SUCCESS：正常完成
    - DEGRADED：部分失败但流程继续（如缺少图标、图表或通知发送失败）
    - FATAL：调用方应终止进程
    """

    status: StageStatus
    detail: str = ""
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None, detail: str = "") -> "StageResult":
        return cls(StageStatus.SUCCESS, detail, value)

    @classmethod
    def degraded(cls, detail: str, value: Any = None) -> "StageResult":
        return cls(StageStatus.DEGRADED, detail, value)

    @classmethod
    def fatal(cls, detail: str) -> "StageResult":
        return cls(StageStatus.FATAL, detail)

    @property
    def is_ok(self) -> bool:
        return self.status is StageStatus.SUCCESS

    @property
    def is_fatal(self) -> bool:
        return self.status is StageStatus.FATAL
