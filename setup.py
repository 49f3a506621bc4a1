from setuptools import setup, find_packages

setup(
    name="wunderground",
    version="0.1",
    packages=find_packages(),
    package_data={"wunderground": ["testdata/*"]},
    install_requires=[
        "aiohttp>=3.9.0",
        "pytz>=2023.3",
        "pyyaml>=6.0.0",
        "python-dotenv>=1.0.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0"
        ]
    },
)
