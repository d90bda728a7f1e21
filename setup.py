"""Setup configuration for env-test tool."""

from setuptools import setup, find_packages

setup(
    name="env-test",
    version="0.1.0",
    description="Environment-aware test runner for JVM tooling",
    packages=find_packages(include=["env_test", "env_test.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "env-test=env_test.cli:main",
        ],
    },
)
