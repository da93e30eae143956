#!/usr/bin/env python3
"""
Setup script for the xml-funnel service

Installs the shared package (funnel_shared) and the service package
(xml_funnel) from backend/.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="xml-funnel",
    version="0.1.0",
    description="Schema-less XML to typed tabular dataset service",
    package_dir={"": "backend"},
    packages=find_namespace_packages(
        where="backend",
        include=["funnel_shared", "funnel_shared.*", "xml_funnel", "xml_funnel.*"],
        exclude=["xml_funnel.tests", "xml_funnel.tests.*"],
    ),
    python_requires=">=3.9",
    install_requires=[
        # 🚀 Web Framework - MSA Core Stack
        "fastapi>=0.104.1",
        "uvicorn[standard]>=0.24.0",
        "httpx>=0.25.2",

        # 📋 Data Validation & Settings
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
)
