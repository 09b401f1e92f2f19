from setuptools import setup, find_packages

setup(
    name="podclaw",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["main"],
    install_requires=[
        "openai>=1.0.0",
        "aiohttp>=3.8.0,<3.14",
        "feedparser>=6.0.0",
        "python-dotenv>=0.19.0",
        "requests>=2.28.0",
        "yt-dlp>=2024.1.0",
        "youtube-transcript-api>=1.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "pytest-mock>=3.10.0",
            "faker>=18.0.0",
            "aioresponses>=0.7.4",
        ],
    },
    entry_points={
        "console_scripts": [
            "podclaw=main:main",
        ],
    },
    python_requires=">=3.8",
)
