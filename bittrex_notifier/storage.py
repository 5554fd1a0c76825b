import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def logo_path(logo_dir: Path, base_currency: str, market_currency: str) -> Path:
    """图标文件路径，格式：{logo_dir}/{base}-{currency}.png"""
    return logo_dir / f"{base_currency}-{market_currency}.png"


def market_icon_path(logo_dir: Path, symbol: str) -> Path:
    # MarketName 本身就是 {base}-{currency}，与 logo_path 一致
    return logo_dir / f"{symbol}.png"


def create_chart_file(symbol: str) -> Path:
    """在系统临时目录创建一个空的 PNG 文件，调用方负责删除。"""
    fd, name = tempfile.mkstemp(prefix=f"{symbol}-", suffix=".png")
    os.close(fd)
    return Path(name)


def remove_file(path: Optional[Union[str, Path]]) -> None:
    """删除临时文件，文件不存在时忽略。"""
    if not path:
        return
    try:
        Path(path).unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:  # pragma: no cover - best effort cleanup
        logger.warning("删除临时文件 %s 失败：%s", path, exc)


def remove_tree(directory: Path) -> None:
    shutil.rmtree(directory, ignore_errors=True)
