from setuptools import find_packages, setup

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="x3270script",
    version="0.1.0",
    author="x3270script Developers",
    description="asyncio scripting client for the s3270 3270 emulator",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["x3270script", "x3270script.*"]),
    include_package_data=True,
    install_requires=[],
    extras_require={
        "dev": [
            "pytest >= 7.0",
            "pytest-asyncio >= 0.21",
            "pytest-cov >= 5.0",
            "hypothesis >= 6.100",
            "flake8 >= 7.0",
            "black >= 24.0",
            "isort >= 5.13",
        ],
        "test": [
            "pytest >= 7.0",
            "pytest-asyncio >= 0.21",
            "pytest-cov >= 5.0",
            "hypothesis >= 6.100",
        ],
    },
    entry_points={
        "console_scripts": [
            "x3270script = x3270script:main",
        ],
    },
    python_requires=">=3.10",
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "License :: OSI Approved :: BSD License",
        "Operating System :: OS Independent",
    ],
)
