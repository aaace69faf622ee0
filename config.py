#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
配置管理模块：集中管理所有配置参数
"""

import os
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

class Config:
    """集中管理所有配置参数"""
    # API配置
    API_KEY = os.getenv("DASHSCOPE_API_KEY", os.getenv("API_KEY", ""))
    MODEL_NAME = "qwen-turbo"

    # 处理配置
    INPUT_CSV_PATH = "./input/indicators.csv"
    MAX_CONCURRENT_REQUESTS = 5
    MAX_RETRIES = 3
    RETRY_SLEEP_TIME = 15

    # 输出配置
    OUTPUT_DIRECTORY = "./output"
    OUTPUT_CSV_PATH = os.path.join(OUTPUT_DIRECTORY, "tai_results.csv")
    FAILED_JSON_PATH = os.path.join(OUTPUT_DIRECTORY, "tai_failed_tasks.json")
