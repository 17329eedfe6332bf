#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Mon Sep 21 18:00:00 2026
@author: yoh
"""
from setuptools import find_packages
from setuptools import setup


setup(
    name="orcs",
    version="0.1",
    author="Yoh Plala",
    author_email="yoh.plala@gmail.com",
    description="Ordered Range Compaction Store",
    python_requires=">=3.9",
    packages=find_packages(include=["orcs", "orcs.*"]),
    tests_require=["pytest"],
    extras_require={"test": ["pytest"]},
    install_requires=["numpy>=1.22",
                      "pandas>=1.3.1",
                      "fastparquet>=0.7.1",
                      "cloudpickle",
                      "flufl.lock>=5.0",
                      "sortedcontainers"]
)
