"""Setup configuration for Whisper Beacon."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="whisper-beacon",
    version="0.1.0",
    description="Whisper Beacon - pwngrid-compatible 802.11 beacon advertiser",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="Whisper Beacon Team",
    python_requires=">=3.8",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "pypubsub>=4.0.3",
        "scapy>=2.5.0",
        "typing_extensions>=4.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "whisper-advertiserd=advertiser.daemon:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: System :: Networking",
    ],
)
