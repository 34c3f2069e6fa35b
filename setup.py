from setuptools import setup, find_packages

setup(
    name="muse-writer",
    version="0.1.0",
    packages=find_packages(include=["muse_writer", "muse_writer.*"]),
    install_requires=[
        "click>=8.2.0",
        "pydantic>=2.5.3",
        "pyyaml>=6.0.1",
        "rich>=13.7.0",
        "loguru>=0.7.2",
        "openai>=1.12.0",
        "google-genai>=1.0.0",
        "fastapi>=0.110.0",
        "uvicorn>=0.27.0",
    ],
    extras_require={
        "test": [
            "pytest>=8.0.0",
            "httpx>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "muse-writer=muse_writer.cli:main",
        ],
    },
    python_requires=">=3.9",
)
