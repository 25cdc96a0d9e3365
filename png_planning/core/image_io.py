#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
图像读写模块

解码交给 OpenCV：去掉 alpha、展开调色板、位深统一为 8 位，输出 RGB。
"""

from pathlib import Path
from typing import Union

import cv2
import numpy as np
from loguru import logger

from png_planning.common.exceptions import ImageDecodeError, DocumentWriteError


def LoadRgbImage(path: Union[str, Path]) -> np.ndarray:
    """
    读取图像为 (H, W, 3) uint8 RGB（兼容中文路径）

    Raises:
        ImageDecodeError: 文件不存在或无法解码
    """
    path = Path(path)
    if not path.is_file():
        error_msg = f"图像文件不存在: {path}"
        logger.error(error_msg)
        raise ImageDecodeError(error_msg)

    try:
        data = np.fromfile(str(path), dtype=np.uint8)
    except OSError as e:
        error_msg = f"读取图像文件失败: {path}: {e}"
        logger.error(error_msg)
        raise ImageDecodeError(error_msg) from e

    # IMREAD_COLOR: 丢弃 alpha，16 位降为 8 位，调色板转 BGR
    img = cv2.imdecode(data, cv2.IMREAD_COLOR) if data.size > 0 else None
    if img is None:
        error_msg = f"无法解码图像文件: {path}"
        logger.error(error_msg)
        raise ImageDecodeError(error_msg)

    rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    h, w = rgb.shape[:2]
    logger.info(f"图像加载成功: {path}, size=({w}, {h})")
    return rgb


def WriteRgbImage(path: Union[str, Path], image_rgb: np.ndarray) -> Path:
    """
    按扩展名编码并写出 RGB 图像

    Raises:
        DocumentWriteError: 编码或写入失败
    """
    path = Path(path)
    suffix = path.suffix or ".png"
    try:
        ok, encoded = cv2.imencode(suffix, cv2.cvtColor(image_rgb, cv2.COLOR_RGB2BGR))
    except cv2.error as e:
        # 扩展名没有对应编码器时 OpenCV 直接抛异常
        error_msg = f"图像编码失败: {path}: {e}"
        logger.error(error_msg)
        raise DocumentWriteError(error_msg) from e
    if not ok:
        error_msg = f"图像编码失败: {path}"
        logger.error(error_msg)
        raise DocumentWriteError(error_msg)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        encoded.tofile(str(path))
    except OSError as e:
        error_msg = f"图像写入失败: {path}: {e}"
        logger.error(error_msg)
        raise DocumentWriteError(error_msg) from e

    logger.info(f"Writing filtered png to {path}")
    return path
