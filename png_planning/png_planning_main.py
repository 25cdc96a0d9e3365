#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
命令行入口：读取配置 → 运行规划流水线 → 输出 SVG
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from loguru import logger

from png_planning.common.exceptions import PngPlanningError
from png_planning.config.loader import load_config
from png_planning.service.png_planning_service import PngPlanningService
from png_planning.utils.logger import SetupLogger


def ParseArgs(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="PNG 栅格图像上的采样路径规划")
    parser.add_argument("--config", type=str, required=True, help="YAML 配置文件路径")
    parser.add_argument("--input", type=str, default=None, help="覆盖输入图像路径")
    parser.add_argument("--output", type=str, default=None, help="覆盖输出 SVG 路径")
    parser.add_argument("--budget", type=float, default=None, help="覆盖求解时间预算（秒）")
    parser.add_argument("--log-dir", type=str, default=None, help="日志目录（不指定则只输出到终端）")
    parser.add_argument("--log-level", type=str, default="INFO", help="日志级别")
    parser.add_argument("--debug-log", action="store_true", help="额外输出 DEBUG 级别日志文件（需要 --log-dir）")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = ParseArgs(argv)
    SetupLogger(args.log_dir, args.log_level, debug_file=args.debug_log)

    try:
        cfg = load_config(Path(args.config))

        overrides = {}
        if args.input is not None:
            overrides["input_image"] = str(Path(args.input).resolve())
        if args.output is not None:
            overrides["output_svg"] = str(Path(args.output).resolve())
        if overrides:
            cfg = cfg.model_copy(update=overrides)
        if args.budget is not None:
            if args.budget <= 0:
                logger.error(f"求解时间预算必须大于0: {args.budget}")
                return 1
            cfg = cfg.model_copy(update={
                "planning": cfg.planning.model_copy(update={"solve_budget_s": args.budget})
            })

        result = PngPlanningService(cfg).Run()
    except PngPlanningError as e:
        logger.error(f"运行失败: {e}")
        return 1

    if result.solved:
        logger.info(f"规划成功: states={len(result.solution)}, svg={result.svg_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
