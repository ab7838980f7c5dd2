import os

from setuptools import find_packages, setup

README = os.path.join(os.path.dirname(__file__), "README.md")


def readme() -> str:
    with open(README, encoding="utf-8") as f:
        return f.read()


setup(
    name="schema_to_openapi",
    version="1.0.0",
    description="Translate validation schemas into OpenAPI schema objects and shared components",
    long_description=readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Code Generators",
        "Topic :: Internet :: WWW/HTTP",
        "Intended Audience :: Developers",
    ],
    keywords="openapi swagger validation schema components",
    license="MIT",
    packages=find_packages(),
    python_requires=">=3.11",
    install_requires=[
        "click>=8.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=23.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "schema_to_openapi=schema_to_openapi.schema_to_openapi:schema_to_openapi",
        ],
    },
    include_package_data=True,
    package_data={
        "schema_to_openapi": ["tests/test_data/*.json"],
    },
    zip_safe=False,
)
