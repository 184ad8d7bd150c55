"""
Ozwillo OAuth Client

OAuth2/OpenID Connect authorization-code client engine with the Ozwillo
provider descriptor.
"""

from setuptools import setup, find_packages

setup(
    name="ozwillo-oauth-client",
    version="1.0.0",
    description="OAuth2/OpenID Connect authorization-code client for Ozwillo",
    author="Ozwillo",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.11",
    install_requires=[
        # HTTP transport
        "httpx>=0.25.0",

        # Models and configuration
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",

        # id_token payload decoding
        "python-jose[cryptography]>=3.3.0",

        # HTTP service
        "fastapi>=0.104.0",
        "uvicorn>=0.24.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "black>=23.10.0",
            "flake8>=6.1.0",
            "mypy>=1.7.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Programming Language :: Python :: 3.11",
        "License :: Other/Proprietary License",
    ],
)
