"""
Setup script for the CallMeLater workflow nodes
"""
from setuptools import setup, find_packages

setup(
    name="callmelater-nodes",
    version="0.1.0",
    packages=find_packages(include=["callmelater", "callmelater.*"]),
    install_requires=[
        "fastapi>=0.115.0",
        "uvicorn>=0.30.0",
        "pydantic>=2.8.0",
        "python-dotenv>=1.0.1",
        "httpx>=0.27.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "callmelater-webhook=callmelater.__main__:main",
        ],
    },
    python_requires=">=3.10",
    description="CallMeLater nodes - schedule webhooks and approvals, receive their callbacks",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
