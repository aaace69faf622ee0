#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
程序入口模块：启动指标元数据生成与TAI评分流程
"""

from logger import logger
from indicator_pipeline import IndicatorPipeline

if __name__ == "__main__":
    try:
        pipeline = IndicatorPipeline()
        pipeline.run()
    except KeyboardInterrupt:
        logger.info("\n用户中断程序...")
    except Exception as e:
        logger.error(f"程序运行过程中发生异常: {e}", exc_info=True)
